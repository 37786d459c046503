from __future__ import annotations

from django.dispatch import Signal

# Sent (via send_robust) when a task execution fails or times out, from both
# the recurring runner and run_once. Connect a receiver to forward failures
# to an error-tracking service.
# Args: task_name (str), timestamp (datetime | None), exception (BaseException),
#       traceback (str), error_message (str)
task_failed = Signal()
