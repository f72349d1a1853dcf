"""
tests/unit/test_api_wrappers.py
Endpoint wrappers hit the right path with the right body, via the pipeline.
"""
import json

import pytest

from scanconsole.api import auth, fingerprint, report, worker, workspace


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call, path, body",
    [
        (lambda c: auth.get_user_list(c), "/user/list", {}),
        (lambda c: workspace.save_workspace(c, {"name": "Blue"}), "/workspace/save", {"name": "Blue"}),
        (lambda c: workspace.delete_workspace(c, "ws-red"), "/workspace/delete", {"id": "ws-red"}),
        (lambda c: fingerprint.get_fingerprint_list(c, {"page": 1}), "/fingerprint/list", {"page": 1}),
        (lambda c: fingerprint.save_fingerprint(c, {"name": "nginx"}), "/fingerprint/save", {"name": "nginx"}),
        (lambda c: fingerprint.delete_fingerprint(c, {"id": "f1"}), "/fingerprint/delete", {"id": "f1"}),
        (lambda c: fingerprint.get_fingerprint_categories(c), "/fingerprint/categories", None),
        (lambda c: fingerprint.sync_fingerprints(c), "/fingerprint/sync", {}),
        (
            lambda c: fingerprint.update_fingerprint_enabled(c, ["f1", "f2"], False),
            "/fingerprint/updateEnabled",
            {"ids": ["f1", "f2"], "enabled": False},
        ),
        (lambda c: report.get_report_detail(c, "task-9"), "/report/detail", {"taskId": "task-9"}),
        (lambda c: worker.get_worker_list(c), "/worker/list", None),
        (lambda c: worker.get_worker_logs_history(c, limit=50), "/worker/logs/history", {"limit": 50}),
        (lambda c: worker.clear_worker_logs(c), "/worker/logs/clear", None),
    ],
)
async def test_wrapper_request_shape(logged_in, backend, call, path, body):
    payload = await call(logged_in.client)

    assert payload["code"] == 0
    sent = backend.last(path)
    assert sent.method == "POST"
    assert sent.headers["Authorization"] == "Bearer tok-admin-1"
    if body is None:
        assert sent.content == b""
    else:
        assert json.loads(sent.content) == body
