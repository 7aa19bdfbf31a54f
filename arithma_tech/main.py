# arithma_tech/main.py

import click

from arithma_tech.cli.main import atc
from arithma_tech.gui.main_window import run_gui


@click.group(context_settings=dict(help_option_names=['-h', '--help']))
def main():
    """
    Arithma-Tech: Arithmetic Encoding for text and images.

    Use the 'gui' command for the graphical interface, or the 'cli' command
    followed by its own sub-commands.

    Example (GUI): python -m arithma_tech.main gui
    Example (CLI): python -m arithma_tech.main cli compress --text "hello"
    """
    pass


@click.command()
def gui():
    """🎨 Launches the graphical user interface."""
    run_gui()


main.add_command(gui)
main.add_command(atc, name='cli')

if __name__ == '__main__':
    main()
