# cli/main.py
import click
from .commands.booklist import booklist

@click.group()
def cli():
    """sffvektor CLI"""
    pass

cli.add_command(booklist)

def main():
    """Entry point for the CLI"""
    cli()

if __name__ == '__main__':
    main()
