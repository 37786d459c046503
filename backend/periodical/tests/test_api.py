from __future__ import annotations

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient, APITestCase

from periodical.registry import default_registry, register


class PeriodicalApiTests(APITestCase):
    def setUp(self):
        default_registry.clear()
        User = get_user_model()
        self.admin = User.objects.create_superuser(username="admin", email="admin@example.com", password="pass")
        self.user = User.objects.create_user(username="user", email="user@example.com", password="pass")
        self.client = APIClient()

        @register("cleanup", "Removes stale rows", execution_interval=60, active=True)
        def cleanup() -> None:
            return None

        @register("dormant", execution_interval=300)
        def dormant() -> None:
            return None

    def tearDown(self):
        default_registry.clear()

    def test_status_requires_admin(self):
        url = reverse("periodical-status")

        response = self.client.get(url)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"]["status"], "unauthorized")

        self.client.force_authenticate(self.user)
        response = self.client.get(url)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"]["status"], "forbidden")

    def test_status_lists_registered_tasks(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("periodical-status"))
        self.assertEqual(response.status_code, 200)

        body = response.json()
        self.assertFalse(body["running"])
        tasks = {t["task_name"]: t for t in body["tasks"]}
        self.assertEqual(set(tasks), {"cleanup", "dormant"})

        self.assertEqual(tasks["cleanup"]["description"], "Removes stale rows")
        self.assertTrue(tasks["cleanup"]["active"])
        self.assertEqual(tasks["cleanup"]["interval"], 60)
        self.assertEqual(tasks["cleanup"]["timeout_interval"], 10)
        self.assertFalse(tasks["cleanup"]["scheduled"])
        self.assertIsNone(tasks["cleanup"]["runtime"])

        self.assertFalse(tasks["dormant"]["active"])
        self.assertIs(tasks["dormant"]["interval"], False)
        self.assertEqual(tasks["dormant"]["execution_interval"], 300)

    def test_overdue_reports_liveness(self):
        self.client.force_authenticate(self.admin)
        url = reverse("periodical-task-overdue", kwargs={"task_name": "cleanup"})

        recent = (timezone.now() - timedelta(seconds=30)).isoformat()
        response = self.client.get(url, {"since": recent})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["overdue"], False)
        self.assertEqual(response.json()["interval"], 60)

        stale = (timezone.now() - timedelta(minutes=10)).isoformat()
        response = self.client.get(url, {"since": stale})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["overdue"], True)

    def test_overdue_unknown_task_is_404(self):
        self.client.force_authenticate(self.admin)
        url = reverse("periodical-task-overdue", kwargs={"task_name": "missing"})

        response = self.client.get(url, {"since": timezone.now().isoformat()})

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"]["status"], "not_found")
        self.assertIn("missing", response.json()["error"]["message"])

    def test_overdue_requires_valid_since(self):
        self.client.force_authenticate(self.admin)
        url = reverse("periodical-task-overdue", kwargs={"task_name": "cleanup"})

        response = self.client.get(url)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["status"], "validation_error")

        response = self.client.get(url, {"since": "last tuesday"})
        self.assertEqual(response.status_code, 400)
