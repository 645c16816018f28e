from __future__ import annotations

OPENSPEC_CONFIG_TEMPLATE = """\
# OpenSpec Project Config - {project_name}
# This context is injected into every artifact (proposal, specs, design, tasks)

schema: spec-driven

context: |
  Project: {project_name}

  # TODO: fill in your actual stack and conventions
  # Tech stack: e.g. TypeScript, React, Node.js / Unity, C# / Python, Django
  # Architecture: e.g. MVC, HMVC, ECS, Redux, MVVM, microservices
  # Testing: e.g. Jest, NUnit, pytest
  # Key constraints: e.g. legacy codebase, must support IE11, no breaking API changes

rules:
  proposal:
    - Always include a rollback plan for legacy code changes
    - List all affected modules
    - Always include an "## Alternatives Considered" section listing at least 2 alternative approaches with their pros, cons, and reason for rejection. Format each as: "### Option: <name> / Pros: ... / Cons: ... / Why rejected: ..."
  specs:
    - Use Given/When/Then format for scenarios
  design:
    - Respect existing legacy constraints
  tasks:
    - Keep tasks atomic (max 2-3 files per task)
    - After all tasks complete, run /opsx:verify
"""


def render_openspec_config(project_name: str) -> str:
    return OPENSPEC_CONFIG_TEMPLATE.format(project_name=project_name)


NEXT_STEPS = """\
Next steps - BROWNFIELD project:
  1. Restart Claude Code
  2. /migrate-to-openspec - scans project + fills all OpenSpec files automatically
  3. Review openspec/MIGRATION_REPORT.md
  4. bd ready - see task list in Beads

Next steps - GREENFIELD project:
  1. Edit openspec/config.yaml - describe your planned stack
  2. Restart Claude Code
  3. /opsx:propose <feature> - start first feature

Key commands:
  bd ready              unblocked tasks right now
  bd create "..."       create a Beads issue
  openspec list         active OpenSpec changes
  /opsx:explore         explore codebase
  /opsx:new <name>      new change
  /opsx:ff              generate all artifacts at once
  /opsx:apply           implement tasks
  /opsx:verify          verify implementation vs specs
  /opsx:archive         archive change -> specs/
"""
