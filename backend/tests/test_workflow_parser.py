from pipeline_canvas.pipeline import parse_workflow
from pipeline_canvas.pipeline.stages import (
    DeployStage,
    GitCloneStage,
    PrebuildCustomStage,
    PrebuildNodeStage,
    RunTestsStage,
)
from pipeline_canvas.services.script_service import DEFAULT_YAML


def kinds(stages):
    return [s.kind for s in stages]


def test_default_workflow_template():
    stages = parse_workflow(DEFAULT_YAML)
    assert kinds(stages) == [
        "start",
        "git_clone",
        "prebuild_node",
        "prebuild_node",
        "run_tests",
        "build_npm",
    ]
    clone = stages[1]
    assert isinstance(clone, GitCloneStage)
    assert clone.repo_url == "https://github.com/user/repo.git"
    assert clone.branch == "main"
    assert stages[4].command == "npm test"


def test_empty_and_garbage_input_yield_start_only():
    assert kinds(parse_workflow("")) == ["start"]
    assert kinds(parse_workflow("steps:\n  foo: [bar\n  ::: }")) == ["start"]


def test_quotes_are_stripped_from_step_name_used_as_label():
    script = """steps:
  - name: "Lint 'all' sources"
    run: make lint
"""
    stage = parse_workflow(script)[1]
    assert isinstance(stage, PrebuildCustomStage)
    assert stage.label == "Lint all sources"
    assert stage.script == "make lint"


def test_unmatched_uses_keeps_step_open():
    script = """- name: Cache
  uses: actions/cache@v4
  run: npm ci
"""
    stages = parse_workflow(script)
    assert kinds(stages) == ["start", "prebuild_node"]
    assert stages[1].manager == "npm"


def test_uses_and_run_in_same_step_emit_two_stages():
    script = """- name: Node
  uses: actions/setup-node@v4
  run: yarn test
"""
    stages = parse_workflow(script)
    assert kinds(stages) == ["start", "prebuild_node", "run_tests"]
    assert stages[2].command == "yarn test"


def test_run_closes_step():
    script = """- name: Build
  run: npm run build
  run: npm test
"""
    assert kinds(parse_workflow(script)) == ["start", "build_npm"]


def test_uses_and_run_outside_a_step_are_ignored():
    script = "uses: actions/checkout@v4\nrun: npm ci\n"
    assert kinds(parse_workflow(script)) == ["start"]


def test_deploy_and_docker_commands():
    script = """- name: Image
  run: docker build -t foo .
- name: Ship
  run: kubectl rollout restart deploy/web
"""
    stages = parse_workflow(script)
    assert kinds(stages) == ["start", "docker_build", "deploy"]
    # Workflow docker builds keep the default file and tag.
    assert stages[1].tag == "myapp:latest"
    assert isinstance(stages[2], DeployStage)
    assert stages[2].environment == "production"
    assert stages[2].deploy_script == "kubectl rollout restart deploy/web"


def test_block_run_is_joined_and_classified():
    script = """jobs:
  ci:
    steps:
      - name: Test everything
        run: |
          npm ci
          npm test
      - name: Package
        run: |
          tar czf out.tgz dist
          ls -la
"""
    stages = parse_workflow(script)
    assert kinds(stages) == ["start", "prebuild_node", "prebuild_custom"]
    custom = stages[2]
    assert custom.label == "Package"
    assert custom.script == "tar czf out.tgz dist\nls -la"


def test_block_run_stops_at_next_sibling_step():
    script = """    steps:
      - name: Tests
        run: |
          pytest -q
      - name: Deploy
        run: ./deploy.sh
"""
    stages = parse_workflow(script)
    assert kinds(stages) == ["start", "prebuild_custom", "deploy"]
    assert stages[1].script == "pytest -q"


def test_block_run_stops_at_blank_line():
    script = """- name: Tests
  run: |
    npm test

    npm run build
"""
    stages = parse_workflow(script)
    assert kinds(stages) == ["start", "run_tests"]
    assert isinstance(stages[1], RunTestsStage)
    assert stages[1].command == "npm test"


def test_folded_block_indicator_is_a_block():
    script = """- name: Install
  run: >-
    npm install
    --no-audit
"""
    stage = parse_workflow(script)[1]
    assert isinstance(stage, PrebuildNodeStage)


def test_empty_block_becomes_empty_custom_command():
    script = "- name: Nothing\n  run: |\n- name: Next\n"
    stage = parse_workflow(script)[1]
    assert isinstance(stage, PrebuildCustomStage)
    assert stage.script == ""
    assert stage.label == "Nothing"


def test_encounter_order_and_no_dedup():
    script = """- name: a
  run: npm ci
- name: b
  run: make
- name: c
  run: npm ci
"""
    assert kinds(parse_workflow(script)) == ["start", "prebuild_node", "prebuild_custom", "prebuild_node"]


def test_parsing_is_deterministic():
    assert parse_workflow(DEFAULT_YAML) == parse_workflow(DEFAULT_YAML)


def test_pnpm_install_run_is_an_install_step():
    stage = parse_workflow("- name: Deps\n  run: pnpm install --frozen-lockfile\n")[1]
    assert isinstance(stage, PrebuildNodeStage)
    assert stage.manager == "npm"
