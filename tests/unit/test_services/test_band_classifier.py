"""Unit tests for band color classification."""
import pytest

from resistorvision.core.colors import ColorLabel, MODEL_CLASS_ORDER
from resistorvision.core.entities import Detection, NormalizedBox
from resistorvision.core.exceptions import DecodeError
from resistorvision.services.band_classifier import (
    CentroidColorClassifier, ModelClassColorMapper, color_distance,
)


@pytest.fixture
def classifier():
    return CentroidColorClassifier()


class TestCentroidColorClassifier:
    """Nearest-centroid naming of averaged RGB samples."""

    @pytest.mark.parametrize("sample,expected", [
        ((0, 0, 0), ColorLabel.BLACK),
        ((255, 255, 255), ColorLabel.WHITE),
        ((10, 10, 10), ColorLabel.BLACK),
        ((140, 70, 20), ColorLabel.BROWN),
        ((255, 10, 10), ColorLabel.RED),
        ((180, 150, 10), ColorLabel.GOLD),
        ((192, 192, 192), ColorLabel.SILVER),
        ((0, 0, 240), ColorLabel.BLUE),
    ])
    def test_known_colors(self, classifier, sample, expected):
        assert classifier.classify(sample) is expected

    def test_sample_outside_every_radius(self, classifier):
        assert classifier.classify((50, 200, 50)) is None

    def test_typical_photo_samples(self, classifier):
        samples = [(145, 75, 25), (15, 15, 15), (245, 15, 15), (185, 155, 15)]

        assert [classifier.classify(s) for s in samples] == [
            ColorLabel.BROWN, ColorLabel.BLACK, ColorLabel.RED, ColorLabel.GOLD,
        ]

    def test_radius_boundary_is_exclusive(self):
        classifier = CentroidColorClassifier([(ColorLabel.RED, (100, 0, 0), 10)])

        assert classifier.classify((110, 0, 0)) is None
        assert classifier.classify((109, 0, 0)) is ColorLabel.RED

    def test_tie_keeps_first_listed(self):
        classifier = CentroidColorClassifier([
            (ColorLabel.GRAY, (100, 100, 100), 50),
            (ColorLabel.SILVER, (100, 100, 100), 50),
        ])

        assert classifier.classify((105, 100, 100)) is ColorLabel.GRAY

    def test_color_distance(self):
        assert color_distance((0, 0, 0), (3, 4, 0)) == pytest.approx(5.0)


class TestModelClassColorMapper:
    """Mapping band model class ids onto labels."""

    def test_follows_model_class_order(self):
        mapper = ModelClassColorMapper()

        assert [mapper.classify(i) for i in range(12)] == list(MODEL_CLASS_ORDER)
        assert mapper.num_classes == 12

    @pytest.mark.parametrize("class_id", [None, -1, 12, 99])
    def test_unknown_class_falls_back_to_brown(self, class_id):
        assert ModelClassColorMapper().classify(class_id) is ColorLabel.BROWN

    def test_strict_mode_raises(self):
        mapper = ModelClassColorMapper(strict=True)

        with pytest.raises(DecodeError):
            mapper.classify(12)

    def test_label_detections(self):
        detections = [
            Detection(NormalizedBox(0.2, 0.5, 0.1, 0.5), 0.9, class_id=8),
            Detection(NormalizedBox(0.4, 0.5, 0.1, 0.5), 0.8, class_id=3),
        ]

        labelled = ModelClassColorMapper().label_detections(detections)

        assert [d.color for d in labelled] == [ColorLabel.RED, ColorLabel.GOLD]
        assert [d.class_id for d in labelled] == [8, 3]
