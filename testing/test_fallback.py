"""Unit tests for the heuristic fallback analyzer."""

from core.analysis.fallback import (
    MAX_CONFIDENCE,
    analyze_fallback,
    build_ethics_flags,
    detect_signals,
    extract_quotes,
)
from core.analysis.references import MIN_SOURCE_REFERENCES
from core.analysis.text import sentences_between
from core.analysis.types import EthicsFlagType, Severity

from conftest import STATISTICAL_ABSTRACT

RESULTS_WITHOUT_STATISTICS = (
    "Interviews with nurses were transcribed and coded by two researchers. "
    "The findings show that nurses value collaborative planning time above other supports. "
    "Nurses described workload as the main obstacle to adopting new materials on the ward. "
    "These outcomes indicate a need for structural changes in how hospitals allocate time. "
    "Several hospitals reported informal mentoring networks that emerged without direction. "
    "Overall the study reveals consistent themes across rural and urban hospital trusts."
)


class TestDetectSignals:
    def test_statistical_abstract(self):
        signals = detect_signals(STATISTICAL_ABSTRACT)
        assert signals.statistics
        assert signals.methodology
        assert signals.results
        assert signals.sample
        assert signals.data_analysis
        assert not signals.ethics

    def test_p_value_alone_counts_as_statistics(self):
        assert detect_signals("The difference held at p=.01 overall").statistics

    def test_plain_text_has_no_signals(self):
        signals = detect_signals("Cats sleep a lot.")
        assert not signals.statistics
        assert not signals.results
        assert signals.word_count == 4


class TestConfidence:
    def test_no_signals_is_base(self):
        assert detect_signals("Cats sleep a lot.").confidence == 0.6

    def test_capped(self):
        long_text = STATISTICAL_ABSTRACT + " word" * 3500
        assert detect_signals(long_text).confidence == MAX_CONFIDENCE

    def test_rounded_to_two_decimals(self):
        confidence = detect_signals(RESULTS_WITHOUT_STATISTICS).confidence
        assert confidence == round(confidence, 2)


class TestExampleScenario:
    """Statistical abstract analyzed with no provider keys."""

    def test_confidence_at_least_three_quarters(self):
        summary = analyze_fallback(STATISTICAL_ABSTRACT, "Spaced Practice")
        assert summary.confidence >= 0.75

    def test_no_missing_statistics_flag(self):
        summary = analyze_fallback(STATISTICAL_ABSTRACT, "Spaced Practice")
        assert not any(
            flag.flag_type is EthicsFlagType.METHODOLOGY for flag in summary.ethics_flags
        )

    def test_citation_quotes_results(self):
        summary = analyze_fallback(STATISTICAL_ABSTRACT, "Spaced Practice")
        assert any("results demonstrate" in c.text.lower() for c in summary.citations)


class TestCitations:
    def test_quotes_are_sentences_of_the_document(self):
        for quote in extract_quotes(STATISTICAL_ABSTRACT):
            assert quote in STATISTICAL_ABSTRACT
            assert 50 < len(quote) < 300

    def test_at_most_three(self):
        assert len(extract_quotes(STATISTICAL_ABSTRACT * 4)) <= 3

    def test_opening_excerpt_when_no_findings(self):
        text = "Cats sleep for most of the day in warm places around the house. " * 10
        summary = analyze_fallback(text, "Cats")
        assert len(summary.citations) == 1
        citation = summary.citations[0]
        assert citation.confidence == 0.70
        assert citation.text in text
        assert len(citation.text) <= 200


class TestEthicsFlags:
    def test_results_without_statistics_flagged(self):
        flags = build_ethics_flags(detect_signals(RESULTS_WITHOUT_STATISTICS))
        methodology = [f for f in flags if f.flag_type is EthicsFlagType.METHODOLOGY]
        assert len(methodology) == 1
        assert methodology[0].severity is Severity.MEDIUM

    def test_missing_ethics_language_flagged(self):
        flags = build_ethics_flags(detect_signals(STATISTICAL_ABSTRACT))
        assert any(f.flag_type is EthicsFlagType.DISCLOSURE for f in flags)

    def test_ethics_language_not_flagged(self):
        text = STATISTICAL_ABSTRACT + " The protocol received IRB approval and informed consent."
        flags = build_ethics_flags(detect_signals(text))
        assert not any(f.flag_type is EthicsFlagType.DISCLOSURE for f in flags)

    def test_short_paper_flagged_low(self):
        flags = build_ethics_flags(detect_signals(STATISTICAL_ABSTRACT))
        quality = [f for f in flags if f.flag_type is EthicsFlagType.DATA_QUALITY]
        assert quality and quality[0].severity is Severity.LOW


class TestSourceReferences:
    def test_references_are_verbatim(self):
        summary = analyze_fallback(STATISTICAL_ABSTRACT, "Spaced Practice")
        for ref in summary.xai_data.source_references:
            assert ref.original_text in STATISTICAL_ABSTRACT

    def test_minimum_cardinality(self):
        assert len(sentences_between(STATISTICAL_ABSTRACT)) >= MIN_SOURCE_REFERENCES
        summary = analyze_fallback(STATISTICAL_ABSTRACT, "Spaced Practice")
        assert MIN_SOURCE_REFERENCES <= len(summary.xai_data.source_references) <= 6

    def test_distinct(self):
        refs = analyze_fallback(RESULTS_WITHOUT_STATISTICS, "Nurses").xai_data.source_references
        texts = [r.original_text for r in refs]
        assert len(texts) == len(set(texts))


class TestTotality:
    def test_empty_content(self):
        summary = analyze_fallback("", "")
        assert summary.content
        assert summary.key_points
        assert summary.xai_data.source_references == []
        assert 0.0 <= summary.confidence <= 1.0

    def test_deterministic(self):
        first = analyze_fallback(STATISTICAL_ABSTRACT, "Spaced Practice")
        second = analyze_fallback(STATISTICAL_ABSTRACT, "Spaced Practice")
        assert first.to_dict() == second.to_dict()

    def test_structurally_complete(self):
        data = analyze_fallback(RESULTS_WITHOUT_STATISTICS, "Nurses").to_dict()
        for key in ("content", "keyPoints", "limitations", "citations", "confidence",
                    "ethicsFlags", "researchGaps", "xaiData"):
            assert key in data
        assert len(data["xaiData"]["decisionPathways"]) == 4
        assert len(data["limitations"]) <= 5


class TestSynthesis:
    def test_short_paper_article(self):
        summary = analyze_fallback(STATISTICAL_ABSTRACT, "Spaced Practice")
        assert "presents a study with" in summary.content

    def test_long_paper_is_comprehensive(self):
        summary = analyze_fallback(" ".join(["word"] * 3001), "Long")
        assert "presents a comprehensive study with 3,001 words" in summary.content


class TestWorkedExample:
    """A ~200 word abstract analyzed with no provider keys configured."""

    ABSTRACT = (
        "Background. Sleep quality among shift workers has received growing attention in recent years. "
        "We surveyed hospital employees working rotating schedules across three regional sites. "
        "The questionnaire captured sleep duration, perceived fatigue, caffeine intake and weekly hours. "
        "Responses were collected over a twelve month period with reminders sent every fortnight. "
        "Our analysis compared workers on fixed schedules with those on rotating schedules. "
        "Overall, the results demonstrate a significant correlation (p < 0.05) between rotating "
        "schedules and shorter reported sleep duration. "
        "Fatigue scores were higher among rotating workers in every site and every age band. "
        "Caffeine intake partly explained the association but did not remove it entirely. "
        "These patterns held after adjusting for weekly hours and the number of dependents at home. "
        "Managers at two sites have since trialled longer recovery windows between rotations. "
        "Early feedback from staff suggests the change is welcome and easy to administer. "
        "We discuss how scheduling policy could be adjusted to protect sleep without reducing cover. "
        "Further work should follow workers over several years to capture longer term health outcomes."
    )

    def test_scenario(self):
        summary = analyze_fallback(self.ABSTRACT, "Shift Work and Sleep")
        assert 150 <= len(self.ABSTRACT.split()) <= 250
        assert summary.confidence >= 0.75
        assert not any(f.flag_type is EthicsFlagType.METHODOLOGY for f in summary.ethics_flags)
        quoted = [c.text for c in summary.citations if "results demonstrate" in c.text]
        assert quoted
        assert all(text in self.ABSTRACT for text in quoted)
