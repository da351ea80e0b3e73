"""Entry point for 'python -m templatesync' command.

This module allows the TemplateSync CLI to be invoked using
'python -m templatesync'.
"""

from templatesync.cli import main

if __name__ == "__main__":
    main()
