from __future__ import annotations

from django.urls import path

from . import views

urlpatterns = [
    path("status/", views.PeriodicalStatusView.as_view(), name="periodical-status"),
    path(
        "tasks/<str:task_name>/overdue/",
        views.PeriodicalOverdueView.as_view(),
        name="periodical-task-overdue",
    ),
]
