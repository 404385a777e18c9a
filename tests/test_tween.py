import pandas as pd
import pytest

from charts import ChartConfig, StateTransition, TimeTransition, plan_state_frames, plan_time_frames
from charts.render import ALPHA_COLUMN, LAYER_COLUMN
from charts.tween import frame_budget


@pytest.fixture
def moving_points():
    # "a" is observed twice, "b" appears only in the second year
    return pd.DataFrame(
        {
            "id": ["a", "a", "b"],
            "year": [2000, 2001, 2001],
            "x": [0.0, 10.0, 5.0],
            "y": [0.0, 20.0, 5.0],
        }
    )


POINTS = ChartConfig(x="x", y="y", group="id")


def test_time_frames_interpolate_between_observations(moving_points):
    frames = plan_time_frames(moving_points, POINTS, TimeTransition(field="year", nframes=3))

    assert [f.time for f in frames] == [2000.0, 2000.5, 2001.0]
    mid = frames[1].data.set_index("id")
    assert mid.loc["a", "x"] == pytest.approx(5.0)
    assert mid.loc["a", "y"] == pytest.approx(10.0)
    last = frames[2].data.set_index("id")
    assert last.loc["a", "x"] == pytest.approx(10.0)


def test_time_frames_fade_in_entering_entities(moving_points):
    frames = plan_time_frames(moving_points, POINTS, TimeTransition(field="year", nframes=3))

    assert frames[0].data["id"].tolist() == ["a"]
    mid = frames[1].data.set_index("id")
    assert mid.loc["b", ALPHA_COLUMN] == pytest.approx(0.5)
    assert mid.loc["a", ALPHA_COLUMN] == pytest.approx(1.0)
    assert frames[2].data.set_index("id").loc["b", ALPHA_COLUMN] == pytest.approx(1.0)


def test_time_frames_without_enter_fade_hide_entities(moving_points):
    transition = TimeTransition(field="year", nframes=3, enter_fade=False)
    frames = plan_time_frames(moving_points, POINTS, transition)
    assert "b" not in frames[1].data["id"].tolist()
    assert "b" in frames[2].data["id"].tolist()


@pytest.fixture
def leaving_points():
    # "b" is observed only in the first year
    return pd.DataFrame(
        {
            "id": ["a", "a", "b"],
            "year": [2000, 2001, 2000],
            "x": [0.0, 10.0, 5.0],
            "y": [0.0, 20.0, 5.0],
        }
    )


def test_time_frames_fade_out_exiting_entities(leaving_points):
    frames = plan_time_frames(leaving_points, POINTS, TimeTransition(field="year", nframes=3))

    assert frames[0].data.set_index("id").loc["b", ALPHA_COLUMN] == pytest.approx(1.0)
    mid = frames[1].data.set_index("id")
    assert mid.loc["b", ALPHA_COLUMN] == pytest.approx(0.5)
    assert mid.loc["b", "x"] == pytest.approx(5.0)
    assert frames[2].data["id"].tolist() == ["a"]


def test_time_frames_without_exit_fade_drop_entities(leaving_points):
    transition = TimeTransition(field="year", nframes=3, exit_fade=False)
    frames = plan_time_frames(leaving_points, POINTS, transition)
    assert "b" in frames[0].data["id"].tolist()
    assert "b" not in frames[1].data["id"].tolist()


def test_time_frames_use_easing(moving_points):
    frames = plan_time_frames(
        moving_points, POINTS, TimeTransition(field="year", nframes=3, easing="quadratic-in")
    )
    assert frames[1].data.set_index("id").loc["a", "x"] == pytest.approx(2.5)


def test_time_frames_carry_text_fields():
    df = pd.DataFrame(
        {"id": ["a", "a"], "year": [2000, 2002], "x": [1.0, 3.0], "y": [1.0, 1.0], "region": ["N", "S"]}
    )
    config = ChartConfig(x="x", y="y", group="id", color="region")
    frames = plan_time_frames(df, config, TimeTransition(field="year", nframes=3))
    assert [f.data["region"].iloc[0] for f in frames] == ["N", "N", "S"]


def test_time_frames_label_with_template(moving_points):
    frames = plan_time_frames(moving_points, POINTS, TimeTransition(field="year", nframes=2))
    assert [f.label for f in frames] == ["2000", "2001"]


def test_time_frames_need_a_group(moving_points):
    with pytest.raises(ValueError):
        plan_time_frames(moving_points, ChartConfig(x="x", y="y"), TimeTransition(field="year"))


def test_time_frames_empty_table():
    df = pd.DataFrame({"id": [], "year": [], "x": [], "y": []})
    assert plan_time_frames(df, POINTS, TimeTransition(field="year")) == []


SIMULATIONS = ChartConfig(x="year", y="value", kind="line_points", color="type", group="type")


def test_frame_budget_splits_frames_by_length():
    transition = StateTransition(field="type", nframes=10, state_length=1, transition_length=1, wrap=False)
    assert frame_budget(2, transition) == (3, 3)
    wrapped = StateTransition(field="type", nframes=12, state_length=2, transition_length=1)
    assert frame_budget(2, wrapped) == (4, 2)


def test_state_frames_hold_then_transition(simulations_df):
    transition = StateTransition(field="type", nframes=10, state_length=1, transition_length=1, wrap=False)
    frames = plan_state_frames(simulations_df, SIMULATIONS, transition)

    assert len(frames) == 9
    assert [f.label for f in frames] == ["natural"] * 3 + ["natural", "human", "human"] + ["human"] * 3

    hold = frames[0].data
    assert len(hold) == 4
    assert set(hold["type"]) == {"natural"}
    assert hold["value"].tolist() == [0.0, 0.1, 0.0, -0.1]


def test_state_frames_interpolate_matched_rows(simulations_df):
    transition = StateTransition(field="type", nframes=10, state_length=1, transition_length=1, wrap=False)
    frames = plan_state_frames(simulations_df, SIMULATIONS, transition)

    # linear easing: the middle transition frame is half way
    middle = frames[4].data.sort_values("year")
    assert middle["value"].tolist() == pytest.approx([0.1, 0.25, 0.3, 0.35])
    assert (middle[ALPHA_COLUMN] == 1.0).all()


def test_state_frames_wrap_back_to_first_state(simulations_df):
    transition = StateTransition(field="type", nframes=12, state_length=2, transition_length=1, wrap=True)
    frames = plan_state_frames(simulations_df, SIMULATIONS, transition)
    # 2 states * (4 hold + 2 moving)
    assert len(frames) == 12
    assert frames[-1].label == "natural"


def test_state_frames_shadow_keeps_previous_states(simulations_df):
    transition = StateTransition(
        field="type", nframes=10, state_length=1, transition_length=1, wrap=False, shadow=True, shadow_alpha=0.2
    )
    frames = plan_state_frames(simulations_df, SIMULATIONS, transition)

    first_hold = frames[0].data
    assert set(first_hold[LAYER_COLUMN]) == {"current"}

    last_hold = frames[-1].data
    shadow = last_hold[last_hold[LAYER_COLUMN] == "shadow:natural"]
    assert len(shadow) == 4
    assert (shadow[ALPHA_COLUMN] == 0.2).all()
    assert set(last_hold.loc[last_hold[LAYER_COLUMN] == "current", "type"]) == {"human"}


def test_state_frames_respect_explicit_order(simulations_df):
    transition = StateTransition(field="type", nframes=4, states=("human", "natural"), wrap=False)
    frames = plan_state_frames(simulations_df, SIMULATIONS, transition)
    assert frames[0].label == "human"

    with pytest.raises(ValueError):
        plan_state_frames(simulations_df, SIMULATIONS, StateTransition(field="type", states=("volcanic",)))


def test_unmatched_rows_fade_between_states():
    df = pd.DataFrame(
        {"year": [2000, 2001, 2001], "value": [1.0, 2.0, 3.0], "type": ["a", "a", "b"]}
    )
    transition = StateTransition(field="type", nframes=10, state_length=1, transition_length=1, wrap=False)
    frames = plan_state_frames(df, SIMULATIONS, transition)
    middle = frames[4].data.set_index("year")
    # 2000 only exists in state "a": fading out
    assert middle.loc[2000, ALPHA_COLUMN] == pytest.approx(0.5)
    assert middle.loc[2001, "value"] == pytest.approx(2.5)
