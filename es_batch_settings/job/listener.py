"""Job lifecycle listeners and a minimal in-process job runner."""

from datetime import datetime
from typing import Callable, List, Optional, Sequence

from es_batch_settings.config import LOCAL_TZ
from es_batch_settings.job.execution import BatchStatus, JobExecution
from es_batch_settings.logging.logger import log_error, log_info


class JobExecutionListener:
    """Callbacks invoked before and after a job.

    Subclasses override either hook; the default implementations do nothing.
    """

    def before_job(self, job_execution: JobExecution) -> None:
        pass

    def after_job(self, job_execution: JobExecution) -> None:
        pass


JobStep = Callable[[JobExecution], None]


def run_job(
    job_execution: JobExecution,
    listeners: Sequence[JobExecutionListener],
    step: JobStep,
) -> JobExecution:
    """Run a job step surrounded by its listeners.

    before_job is called on each listener in order. after_job is called, in
    reverse order, on every listener whose before_job completed, even when
    the step or a later before_job raised, KeyboardInterrupt and SystemExit
    included. The first exception is re-raised
    after all after_job calls; errors raised by after_job during an already
    failed job are logged and recorded on the execution.
    """
    job_execution.status = BatchStatus.STARTED
    job_execution.start_time = datetime.now(LOCAL_TZ)
    log_info("job started", job_name=job_execution.job_name)

    prepared: List[JobExecutionListener] = []
    error: Optional[BaseException] = None
    try:
        for listener in listeners:
            listener.before_job(job_execution)
            prepared.append(listener)
        step(job_execution)
    except Exception as e:
        error = e
        job_execution.add_failure(e)
        log_error("job failed", error=e, job_name=job_execution.job_name)
    except BaseException as e:
        # KeyboardInterrupt, SystemExit: restore in finally, then let it propagate
        job_execution.status = BatchStatus.FAILED
        job_execution.add_failure(e)
        log_error("job interrupted", error=e, job_name=job_execution.job_name)
        raise
    finally:
        after_job_error = _call_after_job(job_execution, prepared)
        if error is None:
            error = after_job_error
        job_execution.end_time = datetime.now(LOCAL_TZ)

    if error is not None:
        job_execution.status = BatchStatus.FAILED
        raise error

    job_execution.status = BatchStatus.COMPLETED
    log_info("job completed", job_name=job_execution.job_name)

    return job_execution


def _call_after_job(
    job_execution: JobExecution,
    prepared: Sequence[JobExecutionListener],
) -> Optional[Exception]:
    """Call after_job in reverse order and return the first error it raised."""
    first_error: Optional[Exception] = None
    for listener in reversed(prepared):
        try:
            listener.after_job(job_execution)
        except Exception as e:
            job_execution.add_failure(e)
            log_error(
                f"after_job of {type(listener).__name__} failed",
                error=e,
                job_name=job_execution.job_name,
            )
            if first_error is None:
                first_error = e
    return first_error
