"""tldrview -- render community-maintained tldr pages in the terminal.

This package keeps a local cache of `tldr <https://tldr.sh>`_ pages and
renders them as styled terminal text. The cache is downloaded as a single
gzip-compressed tarball and replaced wholesale on every update.

Typical workflow::

    tldr --update          # download the page archive
    tldr tar               # render the page for `tar`
    tldr --seed-config     # write a config.toml to customise styles

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for configuration and pages.
    config: XDG-aware path resolution and TOML config loading.
    cache: Archive fetching, extraction, and the on-disk page store.
    pages: Page parsing and rendering.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr output with Rich support.
"""

__version__ = "0.3.0"
