import dataclasses

import pytest

from cmdrisk.types import CommandAnalysis, FileInfo, MatchedPattern, RiskLevel


def test_risk_levels_are_totally_ordered() -> None:
    assert RiskLevel.SAFE < RiskLevel.CAUTION < RiskLevel.DANGEROUS < RiskLevel.CRITICAL
    assert max(RiskLevel.CAUTION, RiskLevel.CRITICAL, RiskLevel.SAFE) is RiskLevel.CRITICAL


def test_risk_level_string_forms() -> None:
    assert str(RiskLevel.DANGEROUS) == "DANGEROUS"
    assert f"{RiskLevel.CAUTION}" == "CAUTION"
    assert f"{RiskLevel.SAFE:>6}" == "  SAFE"


def test_risk_level_from_name_ignores_case() -> None:
    assert RiskLevel.from_name("critical") is RiskLevel.CRITICAL
    assert RiskLevel.from_name(" Caution ") is RiskLevel.CAUTION


def test_risk_level_from_name_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="Unknown risk level"):
        RiskLevel.from_name("severe")


def test_every_level_has_display_color_and_emoji() -> None:
    for level in RiskLevel:
        assert level.color
        assert level.emoji


def test_command_analysis_defaults_are_safe() -> None:
    analysis = CommandAnalysis(command="ls")
    assert analysis.risk_level is RiskLevel.SAFE
    assert analysis.reversible is True
    assert analysis.requires_sudo is False
    assert analysis.blocked is False
    assert analysis.risk_reasons == ()
    assert analysis.patterns == ()


def test_command_analysis_is_frozen() -> None:
    analysis = CommandAnalysis(command="ls")
    with pytest.raises(dataclasses.FrozenInstanceError):
        analysis.risk_level = RiskLevel.CRITICAL


def test_to_dict_renders_levels_as_names() -> None:
    analysis = CommandAnalysis(
        command="rm -rf build",
        risk_level=RiskLevel.DANGEROUS,
        risk_reasons=("Recursive force deletion cannot be undone",),
        affected_paths=("build",),
        affected_files=(FileInfo(path="/work/build", size=4096, is_dir=True, file_count=12),),
        actions=("DELETE",),
        reversible=False,
        patterns=(
            MatchedPattern(pattern=r"\brm\b", description="Recursive or force delete",
                           risk_level=RiskLevel.CAUTION),
        ),
    )

    data = analysis.to_dict()

    assert data["risk_level"] == "DANGEROUS"
    assert data["affected_paths"] == ["build"]
    assert data["affected_files"][0] == {
        "path": "/work/build", "size": 4096, "is_dir": True, "file_count": 12,
    }
    assert data["matched_patterns"][0]["risk_level"] == "CAUTION"
    assert data["reversible"] is False
    assert data["blocked"] is False
