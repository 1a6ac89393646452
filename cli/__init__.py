"""CLI package for sffvektor"""
from .main import cli
from .commands.booklist import booklist

__all__ = ['cli', 'booklist']
