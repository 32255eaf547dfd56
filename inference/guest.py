"""
Process-boundary guest executor.

Runs real inference in a separate, isolated guest process:

  host                                  guest
  ────                                  ─────
  encode(tensor) ── argv --input csv ─▶ decode, infer, encode
  decode(stdout) ◀── one CSV line ───── print

The guest is located through a launcher:
- ArtifactLauncher: prebuilt guest file run by a sandbox runtime
  (the WasmEdge CLI by default). Release build preferred over debug.
- PythonModuleLauncher: the bundled `sandbox.guest` module run by the
  current interpreter in a child process.

Every failure is raised as an ExecutionError subtype so the dispatcher can
apply one fallback policy.
"""

import importlib.util
import logging
import os
import subprocess
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from . import codec
from .base import GuestExecutor
from .errors import (
    BackendNotCompiledError,
    DecodeError,
    EmptyOutputError,
    GuestArtifactMissingError,
    GuestFailedError,
    GuestLaunchError,
    GuestTimeoutError,
    MalformedGuestOutputError,
    ModelNotFoundError,
)
from .formats import ONNX, ModelFormat
from .types import Tensor

logger = logging.getLogger(__name__)

PLUGIN_PATH_ENV = "WASMEDGE_PLUGIN_PATH"
DEFAULT_ARTIFACT_DIR = "guest/target/wasm32-wasi"
DEFAULT_GUEST_MODULE = "sandbox.guest"

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


# ─────────────────────────────────────────────────────
# Launchers
# ─────────────────────────────────────────────────────


class GuestLauncher(ABC):
    """Knows where the guest lives and how to start it."""

    @abstractmethod
    def locate(self) -> str:
        """Return the guest artifact, or raise GuestArtifactMissingError."""
        raise NotImplementedError

    @abstractmethod
    def command(self, artifact: str) -> List[str]:
        """argv prefix that starts the guest; guest args are appended."""
        raise NotImplementedError

    def environment(self) -> Dict[str, str]:
        """Extra environment for the child process."""
        return {}


class ArtifactLauncher(GuestLauncher):
    """
    Prebuilt guest artifact run by a sandbox runtime binary.

    Defaults match the WasmEdge CLI: `wasmedge --dir .:. <guest.wasm> ...`,
    which preopens the current working directory for the guest.
    """

    def __init__(
        self,
        model_format: ModelFormat = ONNX,
        runtime: str = "wasmedge",
        artifact_dir: str = DEFAULT_ARTIFACT_DIR,
        runtime_args: Sequence[str] = ("--dir", ".:."),
        artifact_name: Optional[str] = None,
    ):
        self.model_format = model_format
        self.runtime = runtime
        self.artifact_dir = Path(artifact_dir)
        self.runtime_args = list(runtime_args)
        self.artifact_name = artifact_name or model_format.guest_artifact

    @property
    def release_path(self) -> Path:
        return self.artifact_dir / "release" / self.artifact_name

    @property
    def debug_path(self) -> Path:
        return self.artifact_dir / "debug" / self.artifact_name

    def locate(self) -> str:
        for candidate in (self.release_path, self.debug_path):
            if candidate.exists():
                return str(candidate)

        raise GuestArtifactMissingError(
            f"guest artifact not found at {self.release_path} or {self.debug_path}. "
            f"Build it with:\n"
            f"  cd {self.model_format.guest_crate_dir} && cargo build --release --target wasm32-wasi"
        )

    def command(self, artifact: str) -> List[str]:
        return [self.runtime, *self.runtime_args, artifact]


class PythonModuleLauncher(GuestLauncher):
    """Bundled Python guest, run as `python -m sandbox.guest` in a child process."""

    def __init__(
        self,
        module: str = DEFAULT_GUEST_MODULE,
        interpreter: Optional[str] = None,
        model_format: ModelFormat = ONNX,
    ):
        self.module = module
        self.interpreter = interpreter or sys.executable
        self.model_format = model_format

    def locate(self) -> str:
        try:
            spec = importlib.util.find_spec(self.module)
        except ModuleNotFoundError:
            spec = None
        if spec is None:
            raise GuestArtifactMissingError(
                f"guest module '{self.module}' is not importable. "
                f"Install the project with: pip install -e ."
            )
        return self.module

    def command(self, artifact: str) -> List[str]:
        return [self.interpreter, "-m", artifact, "--format", self.model_format.name]

    def environment(self) -> Dict[str, str]:
        existing = os.environ.get("PYTHONPATH")
        root = str(_PROJECT_ROOT)
        return {"PYTHONPATH": f"{root}{os.pathsep}{existing}" if existing else root}


# ─────────────────────────────────────────────────────
# Executors
# ─────────────────────────────────────────────────────


def model_is_file(model_path: str) -> bool:
    """True for an existing regular file. Locators the OS rejects count as missing."""
    try:
        return Path(model_path).is_file()
    except OSError:
        # e.g. ENAMETOOLONG or EACCES raised by stat()
        return False


def ensure_model_exists(model_path: str, model_format: ModelFormat = ONNX) -> None:
    """Precondition for any real execution. Extension mismatch only warns."""
    if not model_is_file(model_path):
        raise ModelNotFoundError(model_path)
    if not model_format.matches_extension(model_path):
        logger.warning(
            f"model does not have {model_format.extension} extension: {model_path}"
        )


class SubprocessGuestExecutor(GuestExecutor):
    """
    Real backend reached over a process boundary.

    Blocks until the guest exits. With a positive `timeout_s`, an overrunning
    guest is killed and reported as GuestTimeoutError. Zero or negative means
    no timeout.
    """

    def __init__(
        self,
        launcher: GuestLauncher,
        model_format: ModelFormat = ONNX,
        timeout_s: Optional[float] = None,
    ):
        self.launcher = launcher
        self.model_format = model_format
        self.timeout_s = timeout_s if timeout_s and timeout_s > 0 else None

    def _child_env(self, plugin_dir: Optional[str]) -> Dict[str, str]:
        env = dict(os.environ)
        env.update(self.launcher.environment())
        if plugin_dir:
            env[PLUGIN_PATH_ENV] = str(plugin_dir)
        return env

    def execute(
        self,
        model_path: str,
        tensor: Tensor,
        plugin_dir: Optional[str] = None,
    ) -> Tensor:
        ensure_model_exists(model_path, self.model_format)

        artifact = self.launcher.locate()
        csv = codec.encode(tensor)
        cmd = self.launcher.command(artifact) + [
            "--model", str(model_path),
            "--input", csv,
        ]
        logger.debug(f"launching guest: {cmd}")

        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=self._child_env(plugin_dir),
                timeout=self.timeout_s,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise GuestTimeoutError(
                self.timeout_s,
                stdout=_as_text(exc.stdout),
                stderr=_as_text(exc.stderr),
            ) from exc
        except OSError as exc:
            raise GuestLaunchError(
                f"failed to execute {cmd[0]}; ensure the guest runtime is installed and on PATH: {exc}"
            ) from exc

        if proc.returncode != 0:
            raise GuestFailedError(proc.returncode, proc.stdout, proc.stderr)

        line = proc.stdout.strip()
        if not line:
            raise EmptyOutputError()

        try:
            return codec.decode(line)
        except DecodeError as exc:
            raise MalformedGuestOutputError(f"guest output is not a tensor: {exc}") from exc


class DisabledGuestExecutor(GuestExecutor):
    """Real backend not available in this build. Fails every call immediately."""

    def __init__(self, reason: str = "real inference is disabled (REAL_INFERENCE=false)"):
        self.reason = reason

    def execute(
        self,
        model_path: str,
        tensor: Tensor,
        plugin_dir: Optional[str] = None,
    ) -> Tensor:
        raise BackendNotCompiledError(self.reason)


def _as_text(data) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
