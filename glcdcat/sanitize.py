# Strip comments and whitespace from blocks of C initializer code.
import re

# a // comment only counts when preceded by whitespace, so "http://..." inside strings survives
LINE_COMMENT = re.compile(r'(?<=\s)//[^\n\r]*')

# one level of nested-looking /* ... /* ... */ ... */ is swallowed as a whole;
# where no outer */ follows, the comment ends at the first */ as in C
BLOCK_COMMENT = re.compile(
    r'/\*(?:[^*/]|\*(?!/)|/(?!\*)|/\*(?:[^*]|\*(?!/))*\*/)*\*/'
    r'|/\*.*?\*/', re.DOTALL)

BLANK_LINES = re.compile(r'^[ \t]*(?:\r?\n|$)', re.MULTILINE)
WHITESPACE = re.compile(r'\s+')


def strip_line_comments(text:str) -> str:
    """ remove trailing // comments """
    return LINE_COMMENT.sub('', text)


def strip_block_comments(text:str) -> str:
    """ remove /* */ comments, including ones that look nested """
    return BLOCK_COMMENT.sub('', text)


def strip_blank_lines(text:str) -> str:
    """ remove lines that contain nothing but spaces and tabs """
    return BLANK_LINES.sub('', text)


def sanitize(text:str) -> str:
    """Turn a block of controller code into one dense line.

    Comments go first, then every whitespace character, including the ones
    inside string literals. The record patterns rely on this: after sanitizing,
    fields are separated by a bare comma and nothing else.
    """
    text = strip_line_comments(text)
    text = strip_block_comments(text)
    return WHITESPACE.sub('', text)


def clean_interface_code(text:str) -> str:
    """ remove comments and blank lines but keep the spacing inside the strings """
    text = strip_block_comments(text)
    text = strip_line_comments(text)
    return strip_blank_lines(text)
