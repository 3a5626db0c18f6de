"""Core library for open-codelabs.

The executable entrypoints remain at the repo root:
- build_site.py (CLI, static build and watch mode)
- lint_content.py (CLI, content checks)
- new_course.py (CLI, document scaffolding)
- app.py (FastAPI preview server)
- config.py (YAML config)

This package contains the reusable building blocks (content parsing, linting,
rendering, site assembly).
"""
