"""
Tests for result assembly and validation.
"""

import pytest

from src.context.competitor_discovery import current_brand_entry
from src.context.platform_visibility import build_platform_scores
from src.models import AnalysisResult, Competitor
from src.reporter import AnalysisValidationError, assemble_result, fallback_recommendations
from src.scoring import calculate_dimension_scores, calculate_geo_metrics, detect_gaps


@pytest.fixture
def parts(brand_info, rich_facts):
    gaps = detect_gaps(rich_facts)
    return {
        "url": "https://acme.io",
        "brand": brand_info,
        "overall_score": 77,
        "platform_scores": build_platform_scores({}),
        "dimension_scores": calculate_dimension_scores(rich_facts),
        "competitors": [
            Competitor(rank=1, name="Asana", domain="asana.com", score=88, market_overlap=80),
            current_brand_entry(brand_info, rank=2),
        ],
        "gaps": gaps,
        "recommendations": fallback_recommendations(["FAQ Section"], brand_info),
        "geo_metrics": calculate_geo_metrics(rich_facts),
    }


class TestAssembleResult:
    """Tests for assemble_result."""

    def test_patches_current_brand_score(self, parts):
        result = assemble_result(**parts)
        assert isinstance(result, AnalysisResult)
        assert result.current_brand.score == 77
        # Other entries untouched
        assert result.competitors[0].score == 88

    def test_camel_case_output(self, parts):
        data = assemble_result(**parts).to_dict()
        assert data["brandInfo"]["domain"] == "acme.io"
        assert data["overallScore"] == 77
        assert data["competitors"][1]["isCurrentBrand"] is True
        assert data["dimensionScores"][0]["fullMark"] == 100
        assert "overall" in data["geoMetrics"]
        assert data["recommendations"][0]["actionItems"]

    def test_round_trip_validates(self, parts):
        data = assemble_result(**parts).to_dict()
        again = AnalysisResult.model_validate(data)
        assert again.to_dict() == data

    def test_non_contiguous_ranks_rejected(self, parts):
        parts["competitors"] = [
            Competitor(rank=1, name="Asana", domain="asana.com", score=88, market_overlap=80),
            parts["competitors"][1].model_copy(update={"rank": 3}),
        ]
        with pytest.raises(AnalysisValidationError) as exc:
            assemble_result(**parts)
        assert "contiguous" in exc.value.details

    def test_two_current_brands_rejected(self, parts, brand_info):
        parts["competitors"] = [current_brand_entry(brand_info, rank=1), current_brand_entry(brand_info, rank=2)]
        with pytest.raises(AnalysisValidationError):
            assemble_result(**parts)

    def test_empty_recommendations_rejected(self, parts):
        parts["recommendations"] = []
        with pytest.raises(AnalysisValidationError):
            assemble_result(**parts)

    def test_out_of_range_overall_rejected(self, parts):
        parts["overall_score"] = 101
        with pytest.raises(AnalysisValidationError):
            assemble_result(**parts)

    def test_duplicate_dimensions_rejected(self, parts):
        parts["dimension_scores"] = parts["dimension_scores"] + parts["dimension_scores"][:1]
        with pytest.raises(AnalysisValidationError):
            assemble_result(**parts)
