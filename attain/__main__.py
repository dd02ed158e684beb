"""
CLI entry point, when used as a module: `python -m attain`.

Useful for debugging in the IDEs (use the start-mode "Module", module "attain").
"""
from attain import cli

if __name__ == '__main__':
    cli.main()
