import datetime

from attain._cogs.configs.configuration import AttainSettings
from attain._cogs.structs.conditions import Condition
from attain._core.actions.errors import ConditionMismatch, ConvergenceError, DeadlineExceeded, \
                                        DecodeFailure, PollingAborted, PollingStopped, \
                                        ReadFailure, ReplicaMismatch, WriteFailure


def test_read_failure(locator):
    cause = Exception("boo!")
    error = ReadFailure(locator, cause, what="replica count")
    assert isinstance(error, ConvergenceError)
    assert error.locator is locator
    assert error.cause is cause
    assert str(error) == ("Unable to retrieve the replica count of "
                          "shoot--dev--local/local (Infrastructure): boo!")


def test_read_failure_of_the_whole_resource(locator):
    error = ReadFailure(locator, Exception("boo!"))
    assert str(error) == "Unable to retrieve shoot--dev--local/local (Infrastructure): boo!"


def test_decode_failure(locator):
    error = DecodeFailure(locator, ValueError("boo!"))
    assert str(error) == ("Unable to decode the conditions of "
                          "shoot--dev--local/local (Infrastructure): boo!")


def test_write_failure(locator):
    error = WriteFailure(locator, Exception("boo!"), what="replica count")
    assert str(error) == ("Unable to modify the replica count of "
                          "shoot--dev--local/local (Infrastructure): boo!")


def test_write_failure_of_the_whole_resource(locator):
    error = WriteFailure(locator, Exception("boo!"))
    assert str(error) == "Unable to modify shoot--dev--local/local (Infrastructure): boo!"


def test_condition_mismatch(locator):
    observed = [
        Condition('Ready', 'False', 'Provisioning',
                  last_transition_time=datetime.datetime(2020, 1, 1,
                                                         tzinfo=datetime.timezone.utc)),
        Condition('Healthy', 'True'),
    ]
    error = ConditionMismatch(locator, expected=('Ready', 'True', 'Done'), observed=observed)
    assert error.expected == ('Ready', 'True', 'Done')
    assert error.observed == observed
    assert str(error) == (
        "shoot--dev--local/local (Infrastructure) does not yet contain the expected condition. "
        "Expected: type='Ready', status='True', reason='Done'. "
        "Observed: Ready=False (Provisioning) since 2020-01-01T00:00:00+00:00, "
        "Healthy=True (no reason)."
    )


def test_condition_mismatch_with_no_conditions(locator):
    error = ConditionMismatch(locator, expected=('Ready', 'True', 'Done'), observed=[])
    assert str(error).endswith("Observed: no conditions.")


def test_replica_mismatch(locator):
    error = ReplicaMismatch(locator, desired=5, observed=None)
    assert str(error) == ("shoot--dev--local/local (Infrastructure) is not yet scaled: "
                          "desired 5 replicas, observed not reported.")


def test_deadline_without_a_reason():
    error = DeadlineExceeded(10)
    assert isinstance(error, PollingAborted)
    assert error.timeout == 10
    assert error.last is None
    assert error.locator is None
    assert str(error) == "The goal is not reached in 10s."


def test_deadline_with_a_reason(locator):
    last = ReplicaMismatch(locator, desired=5, observed=3)
    error = DeadlineExceeded(10, last=last)
    assert error.last is last
    assert error.locator is locator
    assert str(error) == f"The goal is not reached in 10s. Last reason: {last}"


def test_stopping_with_a_reason(locator):
    last = ReplicaMismatch(locator, desired=5, observed=3)
    error = PollingStopped(last=last)
    assert isinstance(error, PollingAborted)
    assert error.last is last
    assert str(error).startswith("The polling is stopped before the goal is reached.")


def test_default_settings():
    settings = AttainSettings()
    assert settings.polling.interval == 2.0
    assert settings.polling.timeout is None
    assert settings.scaling.setup_timeout == 60.0
    assert settings.networking.error_backoffs == (1, 2, 4)


def test_settings_are_not_shared():
    settings1 = AttainSettings()
    settings2 = AttainSettings()
    settings1.polling.interval = 10
    assert settings2.polling.interval == 2.0
