import pytest
from pydantic import ValidationError

from gibberish_detector.config import DetectorConfig, Settings, DetectorSettings
from gibberish_detector.detector import Detector
from gibberish_detector.errors import ConfigError, InputLengthError, InputTypeError, ModelValidationError
from gibberish_detector.model.schema import Baseline, GibberishModel, Stats
from gibberish_detector.model.store import load_default_model, save_model

NON_GIBBERISH = [
    "Hello, how are you? it is nice to meet you.",
    "Hi",
    "Hey, wassup?",
]
GIBBERISH = "nakjsfnzgfaekjajdgli"


def _tiny_model() -> GibberishModel:
    # threshold = (8 + 2) / 2 = 5
    return GibberishModel(
        table={"ab": 10},
        baseline=Baseline(
            good=Stats(min=8.0, max=10.0, avg=9.0),
            bad=Stats(min=0.0, max=2.0, avg=1.0),
        ),
    )


@pytest.fixture(scope="module")
def detector() -> Detector:
    return Detector()


@pytest.mark.parametrize("text", NON_GIBBERISH)
def test_detects_non_gibberish(detector: Detector, text: str) -> None:
    assert detector.detect(text) is False


def test_detects_gibberish(detector: Detector) -> None:
    assert detector.detect(GIBBERISH) is True
    assert detector.is_gibberish(GIBBERISH) is True


@pytest.mark.parametrize("text", ["", "a", None, False, "!?"])
def test_zero_pair_input_is_gibberish(detector: Detector, text) -> None:
    assert detector.detect(text) is True


@pytest.mark.parametrize("text", [[], {}, lambda: "hi"])
def test_non_string_input_raises(detector: Detector, text) -> None:
    with pytest.raises(InputTypeError):
        detector.detect(text)


def test_default_threshold_is_midpoint(detector: Detector) -> None:
    b = load_default_model().baseline
    assert detector.threshold() == pytest.approx((b.good.min + b.bad.max) / 2)


def test_results_do_not_depend_on_cache(detector: Detector) -> None:
    uncached = detector.with_options(use_cache=False)
    for text in NON_GIBBERISH + [GIBBERISH, ""]:
        assert detector.score(text) == uncached.score(text)
        assert detector.detect(text) == uncached.detect(text)


def test_override_model_is_used(detector: Detector) -> None:
    model = _tiny_model()
    assert detector.detect("abab", model) is False  # 20/3 > 5
    assert detector.detect("xyz", model) is True
    assert detector.detect("abab", model.to_payload()) is False


def test_invalid_override_model_raises(detector: Detector) -> None:
    with pytest.raises(ModelValidationError):
        detector.detect("hello", {"cowsGo": "moo"})


def test_score_with_override_matrix(detector: Detector) -> None:
    assert detector.score("abab", {"ab": 10}) == pytest.approx(20 / 3)
    assert detector.score("abab", _tiny_model()) == pytest.approx(20 / 3)
    with pytest.raises(ModelValidationError):
        detector.score("abab", [{"x": "abc", "y": 1}])


def test_well_formed_configuration_initializes() -> None:
    fn = lambda model: 42  # noqa: E731
    d = Detector(threshold=fn, model=load_default_model(), use_cache=True)
    assert d.config.threshold is fn
    assert d.threshold() == 42.0


@pytest.mark.parametrize("strategy", ["midpoint", "avg_midpoint", "good_min", "bad_max"])
def test_named_threshold_strategies(strategy: str) -> None:
    b = _tiny_model().baseline
    expected = {
        "midpoint": (b.good.min + b.bad.max) / 2,
        "avg_midpoint": (b.good.avg + b.bad.avg) / 2,
        "good_min": b.good.min,
        "bad_max": b.bad.max,
    }[strategy]
    assert Detector(model=_tiny_model(), threshold=strategy).threshold() == expected


@pytest.mark.parametrize("options", [
    {"threshold": True},
    {"threshold": 42},
    {"threshold": "nearest"},
    {"use_cache": "What?"},
    {"use_cache": 1},
    {"max_input_chars": 0},
    {"colour": "blue"},
])
def test_bad_config_raises_config_error(options) -> None:
    with pytest.raises(ConfigError):
        Detector(**options)


def test_bad_model_raises_model_validation_error() -> None:
    with pytest.raises(ModelValidationError):
        Detector(model={"cowsGo": "moo"})


def test_config_and_options_together_are_rejected() -> None:
    with pytest.raises(ConfigError):
        Detector(DetectorConfig.build(), use_cache=False)


def test_with_options_returns_new_detector(detector: Detector) -> None:
    fn = lambda model: 1e9  # noqa: E731
    strict = detector.with_options(threshold=fn)
    assert strict.config.threshold is fn
    assert strict.detect("Hello there") is True
    assert detector.detect("Hello there") is False
    assert detector.config.threshold == "midpoint"


def test_with_options_validates(detector: Detector) -> None:
    with pytest.raises(ConfigError):
        detector.with_options(threshold=True)
    with pytest.raises(ModelValidationError):
        detector.with_options(model={"cowsGo": "moo"})
    with pytest.raises(ConfigError):
        detector.with_options(use_cache="What?")


def test_with_options_model_carries_through(detector: Detector) -> None:
    model = _tiny_model()
    assert detector.with_options(model=model).config.model == model


def test_config_is_frozen(detector: Detector) -> None:
    with pytest.raises(ValidationError):
        detector.config.use_cache = False


def test_shared_default_model_cannot_be_mutated_through_a_detector() -> None:
    before = Detector().score("the the the")
    with pytest.raises(TypeError):
        Detector().config.model.table["th"] = 10**9
    assert Detector().score("the the the") == before


def test_threshold_fn_must_return_a_number() -> None:
    d = Detector(threshold=lambda model: "high")
    with pytest.raises(ConfigError):
        d.detect("hello")


def test_input_length_ceiling() -> None:
    d = Detector(max_input_chars=5)
    assert d.detect("Hi") is False
    with pytest.raises(InputLengthError):
        d.detect("too long for this")
    with pytest.raises(InputLengthError):
        d.score("too long for this")


def test_train_through_facade(detector: Detector) -> None:
    model = detector.train("abab abab", ["abab"], ["zzzz"])
    assert detector.is_valid_model(model)
    assert detector.is_valid_matrix(model.table)


def test_from_config_loads_model_path(tmp_path) -> None:
    path = save_model(_tiny_model(), str(tmp_path / "tiny.json"))
    cfg = Settings(detector=DetectorSettings(model_path=path, threshold="good_min", max_input_chars=None))
    d = Detector.from_config(cfg)
    assert d.config.model == _tiny_model()
    assert d.threshold() == 8.0
    assert d.config.max_input_chars is None


def test_from_config_defaults_to_bundled_model() -> None:
    d = Detector.from_config(Settings())
    assert d.config.model is load_default_model()
    assert d.config.max_input_chars == 100_000
