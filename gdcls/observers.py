"""
Observers receive the diagnostic record of the reported GDCLS iterations. They are purely observational, the
factorization never reads anything back from them.
"""
import logging
from tqdm import tqdm

logger = logging.getLogger(__name__)


def report_step(step: int):
    """
    Steps are reported on every iteration below 100 and then on every 100th iteration.
    """
    return step < 100 or step % 100 == 0


class StepObserver:
    """
    The default observer, ignores every step.
    """

    def on_step(self, step: int, elapsed: float, relative_error: float = None):
        pass

    def close(self):
        pass


class LoggingObserver(StepObserver):
    """
    Logs the step number, the step time in seconds and the relative error when it is tracked.
    """

    def __init__(self, log: logging.Logger = None, level: int = logging.INFO):
        self.log = logger if log is None else log
        self.level = level

    def on_step(self, step: int, elapsed: float, relative_error: float = None):
        if relative_error is None:
            self.log.log(self.level, f"{step} {elapsed:.6f}")
        else:
            self.log.log(self.level, f"{step} {elapsed:.6f} relative error={relative_error}")


class ProgressObserver(StepObserver):
    """
    Displays the reported steps on a tqdm progress bar.

    Parameters
    ----------
    total : int
        The iteration budget, max_steps.
    desc : str
        Prefix of the progress bar description.
    """

    def __init__(self, total: int = None, desc: str = "GDCLS"):
        self.desc = desc
        self.pbar = tqdm(total=total, desc=f"{desc}, Step: NA, Relative Error: NA", position=0, leave=True)

    def on_step(self, step: int, elapsed: float, relative_error: float = None):
        error_str = "NA" if relative_error is None else f"{float(relative_error):.6f}"
        self.pbar.set_description(f"{self.desc}, Step: {step}, Relative Error: {error_str}")
        if step < self.pbar.n:
            # a continued run counts its steps from 1 again
            self.pbar.reset(total=self.pbar.total)
        self.pbar.update(step - self.pbar.n)
        self.pbar.refresh()

    def close(self):
        self.pbar.close()


class RecordingObserver(StepObserver):
    """
    Keeps every reported (step, elapsed, relative_error) record in memory.
    """

    def __init__(self):
        self.records = []

    def on_step(self, step: int, elapsed: float, relative_error: float = None):
        self.records.append((step, elapsed, relative_error))

    @property
    def steps(self):
        return [record[0] for record in self.records]

    @property
    def relative_errors(self):
        return [record[2] for record in self.records]
