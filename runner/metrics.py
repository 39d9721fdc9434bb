from prometheus_client import start_http_server, Counter, Gauge
import threading
from .logger import log

# Metrics
RUNS_TOTAL = Counter("session_runner_runs_total", "Task runs by final status", ["status"])
TEARDOWN_FAILURES = Counter("session_runner_teardown_failures_total", "Teardown steps that failed", ["step"])
HELPER_UP = Gauge("session_runner_helper_up", "1 if the helper process is running, 0 otherwise")
BROWSER_UP = Gauge("session_runner_browser_up", "1 if a browser session is open, 0 otherwise")

_metrics_server_started = False
_metrics_lock = threading.Lock()

def start_metrics_server(port: int):
    global _metrics_server_started
    with _metrics_lock:
        if _metrics_server_started:
            return
        start_http_server(port)
        _metrics_server_started = True
        log("INFO", "metrics_started", f"Prometheus metrics server started on port {port}")
