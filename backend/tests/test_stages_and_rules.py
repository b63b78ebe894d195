import pytest
from pydantic import ValidationError

from pipeline_canvas.pipeline import PALETTE, STAGE_KINDS, default_label, display_label, stage_from_dict
from pipeline_canvas.pipeline.rules import SHELL_RULES, WORKFLOW_RUN_RULES, WORKFLOW_USES_RULES, classify
from pipeline_canvas.pipeline.stages import (
    DeployStage,
    GitCloneStage,
    PrebuildNodeStage,
    RunTestsStage,
    StartStage,
    stage_to_dict,
)


def test_wire_form_uses_camel_case():
    data = stage_to_dict(GitCloneStage(repo_url="https://a/b.git", branch="dev"))
    assert data == {"label": None, "kind": "git_clone", "repoUrl": "https://a/b.git", "branch": "dev"}


def test_stage_from_dict_dispatches_on_kind():
    stage = stage_from_dict({"kind": "deploy", "environment": "staging", "deployScript": "./d.sh"})
    assert isinstance(stage, DeployStage)
    assert stage.deploy_script == "./d.sh"
    assert isinstance(stage_from_dict({"kind": "start"}), StartStage)


def test_stage_from_dict_rejects_unknown_kind_and_bad_enum():
    with pytest.raises(ValidationError):
        stage_from_dict({"kind": "launch_rocket"})
    with pytest.raises(ValidationError):
        stage_from_dict({"kind": "prebuild_node", "manager": "bun"})


def test_stages_are_immutable():
    stage = GitCloneStage()
    with pytest.raises(ValidationError):
        stage.branch = "other"


def test_default_labels():
    assert default_label(StartStage()) == "Start"
    assert default_label(PrebuildNodeStage(manager="yarn")) == "Prebuild Node (yarn)"
    assert default_label(RunTestsStage(test_type="e2e")) == "Run Tests (e2e)"
    assert default_label(DeployStage(environment="dev")) == "Deploy (dev)"
    assert display_label(GitCloneStage(label="Fetch")) == "Fetch"
    assert display_label(GitCloneStage()) == "Git Clone"


def test_every_kind_has_a_default_label():
    for kind in STAGE_KINDS:
        assert default_label(stage_from_dict({"kind": kind}))


def test_palette_offers_every_kind_but_start():
    assert [s.kind for s in PALETTE] == list(STAGE_KINDS[1:])


def test_shell_rule_order_is_inspectable():
    names = [r.name for r in SHELL_RULES]
    assert names[0] == "git-clone"
    assert names[-1] == "custom"
    assert names.index("npm-install") < names.index("test") < names.index("deploy") < names.index("slack")


def test_workflow_tables():
    assert [r.name for r in WORKFLOW_USES_RULES] == ["checkout", "setup-node", "setup-python", "setup-java"]
    assert classify("actions/upload-artifact@v4", WORKFLOW_USES_RULES) is None
    assert classify("echo hi", WORKFLOW_RUN_RULES) is None


def test_npm_install_does_not_shadow_pnpm():
    stage = classify("pnpm install --frozen-lockfile", SHELL_RULES)
    assert stage.manager == "pnpm"


def test_shell_catch_all_row_owns_the_fallback():
    stage = classify("terraform apply", SHELL_RULES)
    assert stage.kind == "prebuild_custom"
    assert stage.script == "terraform apply"
