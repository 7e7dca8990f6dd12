"""OcGateway: reads hub state by running the ``oc`` CLI via subprocess.

Every query is pinned to the session's kubeconfig with ``--kubeconfig`` and
bounded twice: by ``--request-timeout`` on the API call and by a subprocess
timeout slightly longer than that.  Credential logins write their token into
a private temporary kubeconfig so that no hub ever reuses another hub's
login.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from pathlib import Path

from hubboard.models import AuthMode, Session

logger = logging.getLogger(__name__)

# Most extra wall-clock time granted to the process on top of --request-timeout.
SUBPROCESS_GRACE_SECONDS = 2.0


def subprocess_timeout(timeout: float) -> float:
    """Wall-clock limit for an ``oc`` process bounded by *timeout*.

    The grace shrinks with the request timeout, so a short call (the
    connectivity probe) is also killed sooner than a regular one.
    """
    return timeout + min(SUBPROCESS_GRACE_SECONDS, timeout / 2)


def format_request_timeout(timeout: float) -> str:
    """Render seconds as an ``oc`` duration, e.g. ``3s`` or ``1.5s``."""
    return f"{timeout:g}s"


def build_oc_args(
    session: Session,
    args: list[str],
    timeout: float,
    oc_path: str = "oc",
) -> list[str]:
    """Build an ``oc`` command line for a query against *session*."""
    return [
        oc_path,
        "--kubeconfig", session.kubeconfig,
        *args,
        f"--request-timeout={format_request_timeout(timeout)}",
    ]


class OcGateway:
    """Gateway that runs ``oc`` commands via subprocess.

    Failures of any kind (non-zero exit, timeout, missing binary) yield an
    empty result; the reason is only logged at debug level.
    """

    def __init__(self, oc_path: str = "oc") -> None:
        self._oc_path = oc_path

    def login(
        self,
        api: str,
        username: str,
        password: str,
        timeout: float,
    ) -> Session | None:
        with tempfile.NamedTemporaryFile(
            mode="w", prefix="hubboard-", suffix=".kubeconfig", delete=False,
        ) as tmp:
            kubeconfig = tmp.name

        args = [
            self._oc_path, "login", api,
            "-u", username,
            "-p", password,
            "--insecure-skip-tls-verify=true",
            f"--request-timeout={format_request_timeout(timeout)}",
            "--kubeconfig", kubeconfig,
        ]
        if self._run(args, timeout) is None:
            _remove(kubeconfig)
            return None

        return Session(
            kubeconfig=kubeconfig,
            auth_mode=AuthMode.CREDENTIALS,
            server=api,
            temporary=True,
        )

    def use_context(self, kubeconfig: str) -> Session:
        return Session(kubeconfig=kubeconfig, auth_mode=AuthMode.KUBECONFIG)

    def query(self, session: Session, args: list[str], timeout: float) -> str:
        output = self._run(
            build_oc_args(session, args, timeout, oc_path=self._oc_path),
            timeout,
            kubeconfig=session.kubeconfig,
        )
        return output.strip() if output else ""

    def release(self, session: Session) -> None:
        if session.temporary:
            _remove(session.kubeconfig)

    def _run(
        self,
        args: list[str],
        timeout: float,
        kubeconfig: str | None = None,
    ) -> str | None:
        """Run *args*; return stdout on success, ``None`` on any failure."""
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=subprocess_timeout(timeout),
                env=self._build_env(kubeconfig),
            )
        except subprocess.TimeoutExpired:
            logger.debug("oc %s timed out after %ss", _verb(args), timeout)
            return None
        except OSError as e:
            logger.debug("oc %s could not be started: %s", _verb(args), e)
            return None

        if result.returncode != 0:
            logger.debug(
                "oc %s exited with %d: %s",
                _verb(args), result.returncode, result.stderr.strip(),
            )
            return None
        return result.stdout

    def _build_env(self, kubeconfig: str | None) -> dict[str, str] | None:
        """Build environment with KUBECONFIG if needed."""
        if kubeconfig is None:
            return None
        env = os.environ.copy()
        env["KUBECONFIG"] = kubeconfig
        return env


def _verb(args: list[str]) -> str:
    """Short description of a command line for log records (no secrets)."""
    words = [a for a in args[1:] if not a.startswith("-")]
    if args[1:2] == ["--kubeconfig"]:
        words = words[1:]
    return " ".join(words[:2]) or "command"


def _remove(path: str) -> None:
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        logger.debug("Could not remove temporary kubeconfig %s: %s", path, e)
