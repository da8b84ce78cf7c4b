import sys
import os
src_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..")
sys.path.append(src_path)
import logging
from gdcls.observers import StepObserver, LoggingObserver, ProgressObserver, RecordingObserver, report_step


def test_report_step():
    assert all(report_step(step) for step in range(1, 100))
    assert report_step(100)
    assert not report_step(101)
    assert not report_step(150)
    assert report_step(300)


def test_default_observer():
    observer = StepObserver()
    assert observer.on_step(1, 0.1, None) is None
    observer.close()


def test_logging_observer(caplog):
    test_logger = logging.getLogger("gdcls.test_observer")
    observer = LoggingObserver(log=test_logger)
    with caplog.at_level(logging.INFO, logger="gdcls.test_observer"):
        observer.on_step(3, 0.25)
        observer.on_step(4, 0.5, 0.125)
    messages = [record.getMessage() for record in caplog.records if record.name == "gdcls.test_observer"]
    assert messages == ["3 0.250000", "4 0.500000 relative error=0.125"]


def test_progress_observer():
    observer = ProgressObserver(total=200, desc="Test")
    observer.on_step(1, 0.1, None)
    observer.on_step(100, 0.1, 0.5)
    assert observer.pbar.n == 100
    assert "Step: 100" in observer.pbar.desc
    assert "0.500000" in observer.pbar.desc
    observer.close()


def test_progress_observer_continued_run():
    observer = ProgressObserver(total=50, desc="Test")
    for step in range(1, 41):
        observer.on_step(step, 0.01)
    assert observer.pbar.n == 40
    observer.on_step(1, 0.01)
    assert observer.pbar.n == 1
    assert "Step: 1," in observer.pbar.desc
    observer.on_step(2, 0.01)
    assert observer.pbar.n == 2
    observer.close()


def test_recording_observer():
    observer = RecordingObserver()
    observer.on_step(1, 0.1, 0.9)
    observer.on_step(2, 0.2, 0.8)
    assert observer.steps == [1, 2]
    assert observer.relative_errors == [0.9, 0.8]
