"""Stage model - the closed set of pipeline stage kinds and their fields."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

NodeManager = Literal["npm", "yarn", "pnpm"]
OsPackageManager = Literal["apt", "yum", "apk"]
TestType = Literal["unit", "integration", "e2e"]
Environment = Literal["dev", "staging", "production"]

DEFAULT_REPO_URL = "https://github.com/user/repo.git"
DEFAULT_BRANCH = "main"
DEFAULT_PACKAGES = "git curl"
DEFAULT_DOCKERFILE = "Dockerfile"
DEFAULT_IMAGE_TAG = "myapp:latest"
DEFAULT_SLACK_CHANNEL = "#deployments"
DEFAULT_SLACK_MESSAGE = "Deployment completed!"


class _StageBase(BaseModel):
    # Wire form is camelCase (repoUrl, osPkg, ...); attributes stay snake_case.
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    label: str | None = None


class StartStage(_StageBase):
    kind: Literal["start"] = "start"


class GitCloneStage(_StageBase):
    kind: Literal["git_clone"] = "git_clone"
    repo_url: str = DEFAULT_REPO_URL
    branch: str = DEFAULT_BRANCH


class LinuxInstallStage(_StageBase):
    kind: Literal["linux_install"] = "linux_install"
    os_pkg: OsPackageManager = "apt"
    packages: str = DEFAULT_PACKAGES


class PrebuildNodeStage(_StageBase):
    kind: Literal["prebuild_node"] = "prebuild_node"
    manager: NodeManager = "npm"


class PrebuildPythonStage(_StageBase):
    kind: Literal["prebuild_python"] = "prebuild_python"


class PrebuildJavaStage(_StageBase):
    kind: Literal["prebuild_java"] = "prebuild_java"


class PrebuildCustomStage(_StageBase):
    kind: Literal["prebuild_custom"] = "prebuild_custom"
    script: str = ""


class BuildNpmStage(_StageBase):
    kind: Literal["build_npm"] = "build_npm"


class BuildPythonStage(_StageBase):
    kind: Literal["build_python"] = "build_python"


class BuildJavaStage(_StageBase):
    kind: Literal["build_java"] = "build_java"


class DockerBuildStage(_StageBase):
    kind: Literal["docker_build"] = "docker_build"
    dockerfile: str = DEFAULT_DOCKERFILE
    tag: str = DEFAULT_IMAGE_TAG


class RunTestsStage(_StageBase):
    kind: Literal["run_tests"] = "run_tests"
    test_type: TestType = "unit"
    command: str = ""


class DeployStage(_StageBase):
    kind: Literal["deploy"] = "deploy"
    environment: Environment = "production"
    deploy_script: str = ""


class NotifySlackStage(_StageBase):
    kind: Literal["notify_slack"] = "notify_slack"
    channel: str = DEFAULT_SLACK_CHANNEL
    message: str = DEFAULT_SLACK_MESSAGE


Stage = Annotated[
    Union[
        StartStage,
        GitCloneStage,
        LinuxInstallStage,
        PrebuildNodeStage,
        PrebuildPythonStage,
        PrebuildJavaStage,
        PrebuildCustomStage,
        BuildNpmStage,
        BuildPythonStage,
        BuildJavaStage,
        DockerBuildStage,
        RunTestsStage,
        DeployStage,
        NotifySlackStage,
    ],
    Field(discriminator="kind"),
]

_stage_adapter: TypeAdapter[Stage] = TypeAdapter(Stage)

STAGE_KINDS: tuple[str, ...] = (
    "start",
    "git_clone",
    "linux_install",
    "prebuild_node",
    "prebuild_python",
    "prebuild_java",
    "prebuild_custom",
    "build_npm",
    "build_python",
    "build_java",
    "docker_build",
    "run_tests",
    "deploy",
    "notify_slack",
)


def stage_from_dict(data: dict[str, Any]) -> Stage:
    """Validate a wire-form stage record (camelCase or snake_case keys)."""
    return _stage_adapter.validate_python(data)


def stage_to_dict(stage: Stage) -> dict[str, Any]:
    """Wire form of a stage, camelCase keys, label left as-is."""
    return stage.model_dump(by_alias=True)


def default_label(stage: Stage) -> str:
    """Label a stage gets when none was supplied by its producer."""
    if isinstance(stage, PrebuildNodeStage):
        return f"Prebuild Node ({stage.manager})"
    if isinstance(stage, RunTestsStage):
        return f"Run Tests ({stage.test_type})"
    if isinstance(stage, DeployStage):
        return f"Deploy ({stage.environment})"
    return _FIXED_LABELS[stage.kind]


def display_label(stage: Stage) -> str:
    return stage.label or default_label(stage)


_FIXED_LABELS: dict[str, str] = {
    "start": "Start",
    "git_clone": "Git Clone",
    "linux_install": "Linux Install",
    "prebuild_python": "Prebuild Python",
    "prebuild_java": "Prebuild Java",
    "prebuild_custom": "Prebuild Custom",
    "build_npm": "Build NPM",
    "build_python": "Build Python",
    "build_java": "Build Java",
    "docker_build": "Docker Build",
    "notify_slack": "Notify Slack",
}

# Insertable defaults, one per kind, in palette order. Start is never offered.
PALETTE: tuple[Stage, ...] = (
    GitCloneStage(),
    LinuxInstallStage(),
    PrebuildNodeStage(),
    PrebuildPythonStage(),
    PrebuildJavaStage(),
    PrebuildCustomStage(script='echo "custom prebuild"'),
    BuildNpmStage(),
    BuildPythonStage(),
    BuildJavaStage(),
    DockerBuildStage(),
    RunTestsStage(command="npm test"),
    DeployStage(environment="staging", deploy_script="./deploy.sh"),
    NotifySlackStage(),
)
