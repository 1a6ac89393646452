# core/utils/text.py
import re

# zero-width space/non-joiner/joiner and BOM
_INVISIBLE_CHARS = re.compile('[\u200b-\u200d\ufeff]')
_HUNGARIAN_VOWELS = re.compile('[áéíóúöüőű]', re.IGNORECASE)


def remove_invisible_chars(text: str) -> str:
    """Strip zero-width and BOM characters that moly.hu sprinkles into names."""
    return _INVISIBLE_CHARS.sub('', text)


def guess_author_sort_name(name: str) -> str:
    """
    Guess the "Family, Given" form of an author's name.

    Names containing Hungarian accented vowels are assumed to be written in
    Hungarian order (family name first), everything else in Western order
    (family name last). The result only seeds an unapproved author record,
    curators fix the wrong guesses.

    Args:
        name: Display name as shown on the site

    Returns:
        Sort name such as "Pratchett, Terry" or "Jókai, Mór"
    """
    names = name.split()
    if len(names) < 2:
        return name
    if _HUNGARIAN_VOWELS.search(name):
        family, given = names[0], names[1:]
    else:
        family, given = names[-1], names[:-1]
    return f"{family}, {' '.join(given)}"
