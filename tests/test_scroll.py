from logscope.scroll import FollowState, ScrollFollowController


def _controller(auto_follow=True):
    calls = []
    return ScrollFollowController(lambda: calls.append(1), auto_follow=auto_follow), calls


def test_starts_following_and_fires_on_content_change() -> None:
    controller, calls = _controller()

    assert controller.state is FollowState.FOLLOWING
    assert controller.notify_content_changed() is True
    assert calls == [1]


def test_left_bottom_pauses_and_suppresses_effect() -> None:
    controller, calls = _controller()
    controller.report_at_bottom(False)

    assert controller.state is FollowState.PAUSED
    assert controller.notify_content_changed() is False
    assert controller.notify_content_changed() is False
    assert calls == []


def test_back_at_bottom_resumes_without_forcing_jump() -> None:
    controller, calls = _controller(auto_follow=False)

    assert controller.report_at_bottom(True) is True
    assert controller.auto_follow
    assert calls == []
    controller.notify_content_changed()
    assert calls == [1]


def test_jump_to_latest_resumes_and_fires_immediately() -> None:
    controller, calls = _controller()
    controller.report_at_bottom(False)
    controller.jump_to_latest()

    assert controller.state is FollowState.FOLLOWING
    assert calls == [1]
    assert controller.effect_count == 1


def test_repeated_signals_do_not_change_state() -> None:
    controller, _ = _controller()
    assert controller.report_at_bottom(True) is False
    assert controller.report_at_bottom(False) is True
    assert controller.report_at_bottom(False) is False


def test_explicit_toggle() -> None:
    controller, calls = _controller()

    assert controller.set_auto_follow(False) is True
    assert calls == []
    assert controller.scroll_state.auto_follow is False

    assert controller.set_auto_follow(True) is True
    assert calls == [1]
    assert controller.set_auto_follow(True) is False
    assert calls == [1]


def test_effect_is_optional() -> None:
    controller = ScrollFollowController()
    controller.notify_content_changed()
    assert controller.effect_count == 1


def test_failing_effect_is_contained() -> None:
    def gone():
        raise RuntimeError("view gone")

    controller = ScrollFollowController(gone)

    assert controller.notify_content_changed() is True
    controller.jump_to_latest()
    assert controller.effect_count == 2


def test_jump_without_firing_leaves_effect_to_caller() -> None:
    controller, calls = _controller(auto_follow=False)
    controller.jump_to_latest(fire=False)

    assert controller.auto_follow
    assert calls == []
