from provisioning.models import RunOutcome, RunState


def test_new_run_state_is_idle():
    run_state = RunState()

    assert run_state.outcome is RunOutcome.IDLE
    assert run_state.exit_code is None
    assert run_state.current_step_name is None
    assert not run_state.finished


def test_fail_never_records_zero():
    run_state = RunState()
    run_state.start()
    run_state.enter("Install Docker CE")
    run_state.fail(0, "odd")

    assert run_state.exit_code == 1
    assert run_state.outcome is RunOutcome.FAILED
    assert run_state.current_step_name == "Install Docker CE"
    assert run_state.finished


def test_succeed():
    run_state = RunState()
    run_state.start()
    run_state.succeed()

    assert run_state.exit_code == 0
    assert run_state.outcome is RunOutcome.SUCCEEDED


def test_fail_maps_signal_termination_like_a_shell():
    run_state = RunState()
    run_state.start()
    run_state.fail(-9, "yum was killed")

    assert run_state.exit_code == 137
    assert run_state.outcome is RunOutcome.FAILED


def test_fail_keeps_positive_exit_code():
    run_state = RunState()
    run_state.fail(7, "yum failed")

    assert run_state.exit_code == 7
