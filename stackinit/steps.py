"""The provisioning steps stackinit runs, in order.

Steps only describe what to check and what to run; `StepPipeline` decides when. Every action
talks to the outside world through the `Toolkit` collaborators, so the same code serves live runs
and `--dry-run`.

Order matters: `openspec-config` writes into the directory `openspec-init` creates, and the
Beads Claude integration expects `bd init` to have run.
"""

from __future__ import annotations

from pathlib import Path

from .errors import FileWriteError, StepFailed
from .files import source_files
from .pipeline import Step, Toolkit
from .runner import CommandOutcome, format_command
from .templates import render_openspec_config

INSTALL_HINTS = {
    "openspec": "npm install -g @fission-ai/openspec@latest",
    "bd": "brew install beads  OR  go install github.com/steveyegge/beads/cmd/bd@latest",
    "claude": "npm install -g @anthropic-ai/claude-code",
    "npx": "Node.js (https://nodejs.org)",
}

OPENSPEC_INIT = ["openspec", "init", "--tools", "claude", "--profile", "core", "--force"]
OPENSPEC_PROFILE = ["openspec", "config", "profile", "expanded"]
OPENSPEC_UPDATE = ["openspec", "update", "--tools", "claude", "--force"]
OPENSPEC_CONFIG_PATH = "openspec/config.yaml"

BEADS_INIT = ["bd", "init", "--quiet"]
BEADS_MARKERS = (".beads", "beads.jsonl", "issues.jsonl")
BEADS_SETUP_CLAUDE = ["bd", "setup", "claude"]

CLAUDE_MEM_MARKETPLACE = ["claude", "plugin", "marketplace", "add", "thedotmack/claude-mem"]
CLAUDE_MEM_INSTALL = ["claude", "plugin", "install", "claude-mem"]

SMITHERY_SKILL = [
    "npx",
    "@smithery/cli@latest",
    "skill",
    "add",
    "lucastamoios/openspec-to-beads",
    "--agent",
    "claude-code",
]
SMITHERY_SKILL_DIR = ".claude/skills/openspec-to-beads"

MIGRATE_SKILL_NAME = "migrate-to-openspec"
MIGRATE_SKILL_DIR = f".claude/skills/{MIGRATE_SKILL_NAME}"

# beads.jsonl / issues.jsonl are meant to be committed; only local caches are ignored.
IGNORE_ENTRIES = (
    (".beads-cache/", "Beads local SQLite cache (not needed in git)"),
    (".claude-mem/", "claude-mem local session data"),
)


def _describe_failure(out: CommandOutcome) -> str:
    parts = []
    if out.exit_code is not None:
        parts.append(f"exit code {out.exit_code}")
    if out.output:
        parts.append(out.output)
    return "; ".join(parts) or "unknown error"


def _openspec_init(kit: Toolkit) -> str:
    out = kit.runner.run(OPENSPEC_INIT)
    if not out.success:
        raise StepFailed(f"OpenSpec init failed ({_describe_failure(out)})")
    kit.log.ok("OpenSpec initialized (core profile, Claude tools)")

    # The generated config.yaml is replaced by the project template in the next step.
    try:
        kit.writer.remove_if_present(OPENSPEC_CONFIG_PATH)
    except FileWriteError as e:
        kit.warn(f"Could not remove generated {OPENSPEC_CONFIG_PATH}: {e}")

    upgraded = kit.runner.run(OPENSPEC_PROFILE, capture=True).success and kit.runner.run(
        OPENSPEC_UPDATE, capture=True
    ).success
    if not upgraded:
        kit.warn("Could not auto-upgrade OpenSpec to the expanded profile.")
        kit.warn("Run manually: openspec config profile -> select expanded -> openspec update")
        return "initialized with core profile (expanded profile upgrade failed)"
    kit.log.ok("OpenSpec profile upgraded to expanded")
    return "initialized with expanded profile"


def _openspec_config(kit: Toolkit) -> str:
    result = kit.writer.write_if_absent(
        OPENSPEC_CONFIG_PATH,
        render_openspec_config(kit.ctx.project_name),
        description="fill in 'context' with your project details",
    )
    return f"{OPENSPEC_CONFIG_PATH} {result.value}"


def _beads_initialized(kit: Toolkit) -> bool:
    return any(kit.exists(marker) for marker in BEADS_MARKERS)


def _beads_init(kit: Toolkit) -> str:
    # Answers bd's "Contributing to someone else's repo? [y/N]" prompt.
    out = kit.runner.run(BEADS_INIT, input="N\n")
    if not out.success:
        raise StepFailed(f"bd init failed ({_describe_failure(out)})")
    kit.log.ok("Beads initialized (quiet mode)")
    return "initialized (quiet mode)"


def _beads_claude(kit: Toolkit) -> str:
    out = kit.runner.run(BEADS_SETUP_CLAUDE)
    if not out.success:
        raise StepFailed(f"bd setup claude failed ({_describe_failure(out)})")
    kit.log.ok("Beads hooks installed for Claude Code (SessionStart + PreCompact)")
    return "SessionStart + PreCompact hooks installed"


def _claude_mem(kit: Toolkit) -> str:
    kit.log.info("Adding marketplace: thedotmack/claude-mem")
    added = kit.runner.run(CLAUDE_MEM_MARKETPLACE, capture=True)
    if not added.success:
        kit.log.info(f"marketplace add reported: {_describe_failure(added)}")

    kit.log.info("Installing plugin: claude-mem")
    out = kit.runner.run(CLAUDE_MEM_INSTALL, capture=True)
    if not out.success:
        raise StepFailed(f"claude plugin install failed ({_describe_failure(out)})")
    kit.log.ok("claude-mem installed via native claude plugin CLI")
    return "plugin installed"


def _smithery_skill(kit: Toolkit) -> str:
    out = kit.runner.run(SMITHERY_SKILL)
    if not out.success:
        raise StepFailed(f"skill install failed ({_describe_failure(out)})")
    kit.log.ok("Skill openspec-to-beads installed")
    return "installed via Smithery"


def _migrate_skill_source(kit: Toolkit) -> Path | None:
    if kit.skills_dir is None:
        return None
    src = kit.skills_dir / MIGRATE_SKILL_NAME
    return src if src.is_dir() else None


def _migrate_skill_installed(kit: Toolkit) -> bool:
    src = _migrate_skill_source(kit)
    if src is None:
        return kit.exists(MIGRATE_SKILL_DIR)
    # Every source file must have landed; an interrupted copy is finished on the next run.
    files = source_files(src)
    return bool(files) and all(kit.exists(f"{MIGRATE_SKILL_DIR}/{rel}") for rel, _ in files)


def _migrate_skill_source_missing(kit: Toolkit) -> str | None:
    if kit.skills_dir is None:
        return "Skill source directory not configured (--skills-dir / STACKINIT_SKILLS_DIR)"
    if _migrate_skill_source(kit) is None:
        return f"Skill source not found: {kit.skills_dir / MIGRATE_SKILL_NAME}"
    return None


def _migrate_skill(kit: Toolkit) -> str:
    src = _migrate_skill_source(kit)
    assert src is not None
    try:
        results = kit.writer.copy_tree_if_absent(src, MIGRATE_SKILL_DIR)
    except (OSError, UnicodeDecodeError) as e:
        raise StepFailed(f"Failed to read skill source {src}: {e}") from e
    kit.log.ok(f"Skill /{MIGRATE_SKILL_NAME} installed -> {MIGRATE_SKILL_DIR}/")
    kit.log.info(f"  Usage: run /{MIGRATE_SKILL_NAME} in Claude Code on a brownfield project")
    return f"{len(results)} file(s) -> {MIGRATE_SKILL_DIR}/"


def _gitignore_complete(kit: Toolkit) -> bool:
    return all(kit.ignore.contains(pattern) for pattern, _ in IGNORE_ENTRIES)


def _gitignore(kit: Toolkit) -> str:
    added = [pattern for pattern, _ in IGNORE_ENTRIES if not kit.ignore.contains(pattern)]
    for pattern, comment in IGNORE_ENTRIES:
        kit.ignore.ensure_entry(pattern, comment)
    kit.log.ok(f"{kit.ignore.filename} updated")
    return "entries: " + ", ".join(added)


def default_steps() -> list[Step]:
    return [
        Step(
            name="openspec-init",
            title="OpenSpec - init",
            action=_openspec_init,
            satisfied=lambda kit: kit.exists("openspec"),
            satisfied_note="openspec/ already exists",
            requires=("openspec",),
            guidance=format_command(OPENSPEC_INIT),
        ),
        Step(
            name="openspec-config",
            title="OpenSpec - config.yaml",
            action=_openspec_config,
            satisfied=lambda kit: kit.exists(OPENSPEC_CONFIG_PATH),
            satisfied_note=f"{OPENSPEC_CONFIG_PATH} already exists",
        ),
        Step(
            name="beads-init",
            title="Beads - init",
            action=_beads_init,
            satisfied=_beads_initialized,
            satisfied_note="Beads already initialized",
            requires=("bd",),
            guidance="echo N | bd init --quiet",
        ),
        Step(
            name="beads-claude",
            title="Beads - Claude Code integration",
            action=_beads_claude,
            requires=("bd",),
            guidance=format_command(BEADS_SETUP_CLAUDE),
        ),
        Step(
            name="claude-mem",
            title="claude-mem - plugin install",
            action=_claude_mem,
            requires=("claude",),
            guidance="inside Claude Code: /plugin marketplace add thedotmack/claude-mem, then /plugin install claude-mem",
        ),
        Step(
            name="openspec-to-beads",
            title="Skill - openspec-to-beads",
            action=_smithery_skill,
            satisfied=lambda kit: kit.exists(SMITHERY_SKILL_DIR),
            satisfied_note=f"{SMITHERY_SKILL_DIR}/ already exists",
            requires=("npx",),
            guidance=format_command(SMITHERY_SKILL),
        ),
        Step(
            name=MIGRATE_SKILL_NAME,
            title=f"Skill - /{MIGRATE_SKILL_NAME} (brownfield migration)",
            action=_migrate_skill,
            satisfied=_migrate_skill_installed,
            satisfied_note=f"{MIGRATE_SKILL_DIR}/ already complete",
            precondition=_migrate_skill_source_missing,
        ),
        Step(
            name="gitignore",
            title="Updating .gitignore",
            action=_gitignore,
            satisfied=_gitignore_complete,
            satisfied_note="all entries already present",
        ),
    ]
