"""Ordered classification tables shared by the workflow and shell parsers.

Each table is a tuple of ``Rule`` values evaluated top to bottom; the first rule
whose predicate matches builds the stage and no later rule is tried.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from .stages import (
    DEFAULT_BRANCH,
    DEFAULT_DOCKERFILE,
    DEFAULT_IMAGE_TAG,
    DEFAULT_PACKAGES,
    DEFAULT_REPO_URL,
    BuildJavaStage,
    BuildNpmStage,
    BuildPythonStage,
    DeployStage,
    DockerBuildStage,
    GitCloneStage,
    LinuxInstallStage,
    NotifySlackStage,
    PrebuildCustomStage,
    PrebuildJavaStage,
    PrebuildNodeStage,
    PrebuildPythonStage,
    RunTestsStage,
    Stage,
)


@dataclass(frozen=True)
class Rule:
    """One (predicate, constructor) row of a classification table."""

    name: str
    matches: Callable[[str], bool]
    build: Callable[[str], Stage]


def contains_any(*needles: str) -> Callable[[str], bool]:
    return lambda text: any(n in text for n in needles)


def contains_all(*needles: str) -> Callable[[str], bool]:
    return lambda text: all(n in text for n in needles)


def matches_pattern(pattern: str) -> Callable[[str], bool]:
    compiled = re.compile(pattern)
    return lambda text: compiled.search(text) is not None


# Shell only: "npm install" must not fire inside "pnpm install", which has its own row.
_NPM_INSTALL = matches_pattern(r"(?<![\w-])npm (?:ci|install)\b")


def _always(_text: str) -> bool:
    return True


def classify(text: str, rules: tuple[Rule, ...]) -> Stage | None:
    """Return the stage built by the first matching rule, or None."""
    for rule in rules:
        if rule.matches(text):
            return rule.build(text)
    return None


def _flag_value(text: str, *flags: str) -> str | None:
    # First occurrence wins; accepts "-t tag", "--tag tag" and "--tag=tag".
    alternatives = "|".join(re.escape(f) for f in flags)
    m = re.search(rf"(?:^|\s)(?:{alternatives})(?:\s+|=)(\S+)", text)
    return m.group(1) if m else None


# --- extractors ---------------------------------------------------------------


def _git_clone(line: str) -> Stage:
    repo = re.search(r"git clone.*?(\S+\.git)(?:\s|$)", line)
    branch = _flag_value(line, "-b", "--branch")
    return GitCloneStage(
        label="Git Clone",
        repo_url=repo.group(1) if repo else DEFAULT_REPO_URL,
        branch=branch or DEFAULT_BRANCH,
    )


def _apt_install(line: str) -> Stage:
    _, _, tail = line.partition("apt-get install")
    packages = [tok for tok in tail.split() if not tok.startswith("-")]
    return LinuxInstallStage(
        label="Linux Install",
        os_pkg="apt",
        packages=" ".join(packages) or DEFAULT_PACKAGES,
    )


def _docker_build(line: str) -> Stage:
    return DockerBuildStage(
        label="Docker Build",
        dockerfile=_flag_value(line, "-f", "--file") or DEFAULT_DOCKERFILE,
        tag=_flag_value(line, "-t", "--tag") or DEFAULT_IMAGE_TAG,
    )


def _install_deps(manager: str) -> Callable[[str], Stage]:
    return lambda _text: PrebuildNodeStage(label="Install Dependencies", manager=manager)


def _run_tests(command: str) -> Stage:
    return RunTestsStage(label="Run Tests", test_type="unit", command=command)


def _deploy(command: str) -> Stage:
    return DeployStage(label="Deploy", environment="production", deploy_script=command)


# --- workflow (YAML) tables ---------------------------------------------------

WORKFLOW_USES_RULES: tuple[Rule, ...] = (
    Rule(
        "checkout",
        contains_any("checkout"),
        lambda _a: GitCloneStage(label="Git Clone", repo_url=DEFAULT_REPO_URL, branch=DEFAULT_BRANCH),
    ),
    Rule(
        "setup-node",
        contains_any("setup-node"),
        lambda _a: PrebuildNodeStage(label="Prebuild Node", manager="npm"),
    ),
    Rule("setup-python", contains_any("setup-python"), lambda _a: PrebuildPythonStage(label="Prebuild Python")),
    Rule("setup-java", contains_any("setup-java"), lambda _a: PrebuildJavaStage(label="Prebuild Java")),
)

# No fallback row: the workflow parser labels unmatched commands with the step name.
WORKFLOW_RUN_RULES: tuple[Rule, ...] = (
    Rule("install", contains_any("npm ci", "npm install"), _install_deps("npm")),
    Rule("test", contains_any("npm test", "yarn test"), _run_tests),
    Rule("build", contains_any("npm run build", "yarn build"), lambda _c: BuildNpmStage(label="Build NPM")),
    Rule(
        "docker-build",
        contains_any("docker build"),
        lambda _c: DockerBuildStage(label="Docker Build", dockerfile=DEFAULT_DOCKERFILE, tag=DEFAULT_IMAGE_TAG),
    ),
    Rule("deploy", contains_any("deploy", "kubectl"), _deploy),
)

# --- shell tables -------------------------------------------------------------

SHELL_SKIP_PREFIXES: tuple[str, ...] = ("#", "#!/", "set ", "echo ")

SHELL_RULES: tuple[Rule, ...] = (
    Rule("git-clone", contains_any("git clone"), _git_clone),
    Rule("apt-install", contains_any("apt-get install"), _apt_install),
    Rule("npm-install", _NPM_INSTALL, _install_deps("npm")),
    Rule("yarn-install", contains_any("yarn install"), _install_deps("yarn")),
    Rule("pnpm-install", contains_any("pnpm install"), _install_deps("pnpm")),
    Rule("pip-install", contains_any("pip install"), lambda _l: PrebuildPythonStage(label="Prebuild Python")),
    Rule("test", contains_any("npm test", "yarn test"), _run_tests),
    Rule("npm-build", contains_any("npm run build", "yarn build"), lambda _l: BuildNpmStage(label="Build NPM")),
    Rule(
        "python-build",
        contains_any("python setup.py build"),
        lambda _l: BuildPythonStage(label="Build Python"),
    ),
    Rule("java-build", contains_any("mvn package", "gradle build"), lambda _l: BuildJavaStage(label="Build Java")),
    Rule("docker-build", contains_any("docker build"), _docker_build),
    Rule("deploy", contains_any("deploy", "kubectl", "./deploy"), _deploy),
    Rule("slack", contains_all("curl", "slack"), lambda _l: NotifySlackStage(label="Notify Slack")),
    Rule("custom", _always, lambda line: PrebuildCustomStage(label="Custom Command", script=line)),
)
