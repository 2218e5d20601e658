import pytest

from app import app as flask_app


AUTH_LOG = "\n".join([
    "Dec  1 10:00:01 web01 sshd[1001]: Failed password for root from 9.9.9.9 port 22 ssh2",
    "Dec  1 10:00:02 web01 sshd[1002]: Failed password for root from 9.9.9.9 port 22 ssh2",
    "Dec  1 10:00:03 web01 sshd[1003]: Failed password for admin from 9.9.9.9 port 22 ssh2",
    "Dec  1 10:00:04 web01 sshd[1004]: Accepted password for deploy from 192.168.1.7 port 22 ssh2",
    '10.1.1.1 - - [01/Dec/2025:10:00:05 +0000] "GET /admin/config.php HTTP/1.1" 200 512 "-" "sqlmap/1.5"',
    '10.1.1.2 - - [01/Dec/2025:10:00:06 +0000] "GET /download?file=../../etc/passwd HTTP/1.1" 404 0 "-" "curl/7.88.1"',
])


@pytest.fixture
def app():
    flask_app.config.update(
        TESTING=True,
        BRUTE_FORCE_THRESHOLD=5,
        INCLUDE_CHART=True,
        MAX_CONTENT_LENGTH=50 * 1024 * 1024,
    )
    yield flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_log():
    return AUTH_LOG
