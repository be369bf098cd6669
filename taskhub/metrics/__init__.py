# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Prometheus metrics for the task service."""
from prometheus_client import Counter, Histogram

USERS_REGISTERED = Counter(
    "taskhub_users_registered_total", "Total user accounts created", ["source"]
)
LOGINS = Counter(
    "taskhub_logins_total", "Login attempts", ["outcome"]
)
TASKS_CREATED = Counter(
    "taskhub_tasks_created_total", "Total tasks created", ["priority"]
)
TASK_STATUS_CHANGES = Counter(
    "taskhub_task_status_changes_total", "Task status transitions", ["status"]
)
TEAMS_CREATED = Counter(
    "taskhub_teams_created_total", "Total teams created"
)
NOTIFICATIONS_EMITTED = Counter(
    "taskhub_notifications_emitted_total", "Push events emitted", ["event", "outcome"]
)
REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request latency", ["method", "endpoint"]
)
HTTP_ERRORS = Counter(
    "http_errors_total", "Total HTTP errors", ["method", "endpoint", "status"]
)
