"""
Experiment tracking helpers (optional MLflow backend).

MLflow is imported only inside an enabled run, so it stays an optional
extra. Logging calls outside `maybe_mlflow_run(True, ...)` are no-ops.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional

_active = False


@contextmanager
def maybe_mlflow_run(enabled: bool, run_name: str, log_dir: Optional[Path] = None) -> Iterator[None]:
    global _active
    if not enabled:
        yield None
        return
    try:
        import mlflow  # type: ignore
    except ImportError:
        logging.warning("mlflow not installed; use pip install .[tracking]. Continuing without tracking.")
        yield None
        return
    try:
        if log_dir is not None:
            mlflow.set_tracking_uri((log_dir.resolve() / "mlruns").as_uri())
        run = mlflow.start_run(run_name=run_name)
    except Exception as e:
        logging.warning("Could not start MLflow run: %s: %s. Continuing without tracking.",
                        type(e).__name__, e)
        yield None
        return
    _active = True
    try:
        yield None
    finally:
        _active = False
        try:
            mlflow.end_run()
        except Exception as e:
            logging.warning("Could not end MLflow run %s: %s", run.info.run_id, e)


def log_params(params: Dict[str, object]) -> None:
    if not _active:
        return
    import mlflow  # type: ignore

    _soft(lambda: mlflow.log_params(params))


def log_metrics(metrics: Dict[str, float]) -> None:
    if not _active:
        return
    import mlflow  # type: ignore

    _soft(lambda: mlflow.log_metrics(metrics))


def log_artifact(path: Path, artifact_path: Optional[str] = None) -> None:
    if not _active:
        return
    import mlflow  # type: ignore

    _soft(lambda: mlflow.log_artifact(str(path), artifact_path=artifact_path))


def _soft(call) -> None:
    try:
        call()
    except Exception as e:
        logging.warning("MLflow logging failed: %s: %s", type(e).__name__, e)
