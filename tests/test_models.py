"""
Tests for ccss_import.importer.models module.
"""

import pytest
from pydantic import ValidationError

from ccss_import.hierarchy.models import ResolutionRecord
from ccss_import.importer.models import (
    INVALID_SCALE_CONFIGURATION,
    SCALE_CONFIGURATION_REQUIRED,
    CompetencyRecord,
    FrameworkRecord,
    format_validation_error,
    to_competency_record,
    to_framework_record,
)
from ccss_import.models.constants import FORMAT_HTML, SYSTEM_CONTEXT_ID
from tests.helpers import MATH_K_CC_A_2, MATH_ROOT, SCALE_CONFIGURATION, SCALE_ID


def _framework(**overrides) -> FrameworkRecord:
    fields = {
        "shortname": "CCSS.Math",
        "idnumber": MATH_ROOT,
        "scaleid": SCALE_ID,
        "scaleconfiguration": SCALE_CONFIGURATION,
    }
    fields.update(overrides)
    return FrameworkRecord(**fields)


class TestFrameworkRecord:
    """Tests for FrameworkRecord validation."""

    def test_valid(self):
        framework = _framework()

        assert framework.descriptionformat == FORMAT_HTML
        assert framework.contextid == SYSTEM_CONTEXT_ID

    def test_single_rating_can_be_default_and_proficient(self):
        _framework(scaleconfiguration='[{"scaleid":2},{"id":1,"scaledefault":"1","proficient":true}]')

    @pytest.mark.parametrize(
        "configuration",
        [
            "not json",
            "{}",
            "[]",
            '["2"]',
            '[{"scaleid":"abc"}]',
            '[{"scaleid":"3"},{"id":1,"scaledefault":1,"proficient":1}]',
        ],
    )
    def test_invalid_configuration(self, configuration):
        with pytest.raises(ValidationError, match=INVALID_SCALE_CONFIGURATION):
            _framework(scaleconfiguration=configuration)

    @pytest.mark.parametrize(
        "configuration",
        [
            '[{"scaleid":"2"}]',
            '[{"scaleid":"2"},{"id":1,"scaledefault":1,"proficient":0}]',
            '[{"scaleid":"2"},{"id":1,"scaledefault":0,"proficient":1}]',
        ],
    )
    def test_default_and_proficient_required(self, configuration):
        with pytest.raises(ValidationError, match=SCALE_CONFIGURATION_REQUIRED):
            _framework(scaleconfiguration=configuration)

    def test_scale_id_must_be_positive(self):
        with pytest.raises(ValidationError):
            _framework(scaleid=0)

    def test_blank_shortname(self):
        with pytest.raises(ValidationError, match="must not be empty"):
            _framework(shortname="  ")

    def test_idnumber_too_long(self):
        with pytest.raises(ValidationError):
            _framework(idnumber=MATH_ROOT + "x" * 100)


class TestCompetencyRecord:
    """Tests for CompetencyRecord validation."""

    def test_defaults_to_top_level(self):
        record = CompetencyRecord(shortname="A", idnumber="a", competencyframeworkid=1)

        assert record.parentid == 0

    def test_framework_required(self):
        with pytest.raises(ValidationError):
            CompetencyRecord(shortname="A", idnumber="a", competencyframeworkid=0)

    def test_blank_idnumber(self):
        with pytest.raises(ValidationError):
            CompetencyRecord(shortname="A", idnumber="", competencyframeworkid=1)


class TestMapping:
    """Tests for mapping resolution records to persisted records."""

    def test_framework_from_root(self):
        root = ResolutionRecord(
            idnumber=MATH_ROOT,
            parentidnumber="",
            description="<p>Mathematics Standards</p>",
            shortname="CCSS.Math",
            gradelevels="K, 1",
        )

        framework = to_framework_record(root, SCALE_ID, SCALE_CONFIGURATION, context_id=5)

        assert framework.idnumber == MATH_ROOT
        assert framework.shortname == "CCSS.Math"
        # Grade levels only decorate competencies
        assert framework.description == "<p>Mathematics Standards</p>"
        assert framework.scaleconfiguration == SCALE_CONFIGURATION
        assert framework.contextid == 5

    def test_competency_appends_grade_levels(self):
        record = ResolutionRecord(
            idnumber=MATH_K_CC_A_2,
            parentidnumber="",
            description="<p>Count forward.</p>",
            shortname="CCSS.Math.Content.K.CC.A.2",
            gradelevels="K, 1",
        )

        competency = to_competency_record(record, framework_id=7, parent_id=9)

        assert competency.description == (
            "<p>Count forward.</p><p><strong>Grade levels</strong><br/>K, 1</p>"
        )
        assert competency.competencyframeworkid == 7
        assert competency.parentid == 9
        assert competency.descriptionformat == FORMAT_HTML

    def test_competency_without_grade_levels_or_parent(self):
        record = ResolutionRecord(
            idnumber=MATH_K_CC_A_2,
            parentidnumber="",
            description="Synthesized heading",
            shortname="CCSS.Math.Content.K.CC.A.2",
        )

        competency = to_competency_record(record, framework_id=7)

        assert competency.description == "Synthesized heading"
        assert competency.parentid == 0

    def test_shortname_blank_fails_mapping(self):
        record = ResolutionRecord(idnumber=MATH_ROOT, parentidnumber="", description="", shortname="")

        with pytest.raises(ValidationError):
            to_framework_record(record, SCALE_ID, SCALE_CONFIGURATION)


def test_format_validation_error():
    with pytest.raises(ValidationError) as exc_info:
        _framework(shortname=" ", scaleconfiguration='[{"scaleid":"2"}]')

    message = format_validation_error(exc_info.value)

    assert message.startswith("shortname: must not be empty")
    assert "Value error" not in message
