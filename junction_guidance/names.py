"""
Street name lookup and name-change detection.

Names and references come straight from the OSM attributes of an edge. Two names
count as the same street if they only differ in a directional prefix/suffix
("North Main Street" vs "Main Street South"), if one contains the other, or if
the references still match.
"""
import math

from .config import STREET_NAME_SUFFIXES


def _normalize_name(n):
    # OSMnx merges ways into a list of names when simplifying the graph
    if n is None or (isinstance(n, float) and math.isnan(n)):
        return ""
    if isinstance(n, (list, tuple)):
        return ";".join(_normalize_name(x) for x in n if _normalize_name(x))
    return str(n).strip()


class NameTable:
    def name_for(self, data):
        return _normalize_name(data.get("name"))

    def ref_for(self, data):
        return _normalize_name(data.get("ref"))


class SuffixTable:
    def __init__(self, suffixes=STREET_NAME_SUFFIXES):
        self.suffixes = {s.lower() for s in suffixes}

    def is_suffix(self, word):
        return word.lower() in self.suffixes

    def __contains__(self, word):
        return self.is_suffix(word)


def get_prefix_and_suffix(name):
    """
    First and last word of a name, lower-cased. Single words have neither.
    """
    if " " not in name:
        return "", ""
    return name[:name.find(" ")].lower(), name[name.rfind(" ") + 1:].lower()


def _is_prefix_or_suffix_change(first, second, suffix_table):
    first_prefix, first_suffix = get_prefix_and_suffix(first)
    second_prefix, second_suffix = get_prefix_and_suffix(second)

    def strip_prefix(name, prefix):
        if prefix and prefix in suffix_table:
            return name[len(prefix) + 1:]
        return name

    def strip_suffix(name, suffix):
        if suffix and suffix in suffix_table:
            return name[:len(name) - len(suffix) - 1]
        return name

    is_prefix_change = strip_prefix(first, first_prefix) == strip_prefix(second, second_prefix)
    is_suffix_change = strip_suffix(first, first_suffix) == strip_suffix(second, second_suffix)
    return is_prefix_change or is_suffix_change


def requires_name_announced(from_name, from_ref, to_name, to_ref, suffix_table):
    # first is empty and the second is not
    if not from_name and not from_ref and (to_name or to_ref):
        return True

    names_are_empty = not from_name and not to_name
    name_is_contained = from_name.startswith(to_name) or to_name.startswith(from_name)
    is_suffix_change = _is_prefix_or_suffix_change(from_name, to_name, suffix_table)
    names_are_equal = from_name == to_name or name_is_contained or is_suffix_change
    name_is_removed = bool(from_name) and not to_name

    refs_are_empty = not from_ref and not to_ref
    ref_is_contained = not from_ref or not to_ref or from_ref in to_ref or to_ref in from_ref
    ref_is_removed = bool(from_ref) and not to_ref

    obvious_change = (
        (names_are_empty and refs_are_empty)
        or (names_are_equal and ref_is_contained)
        or (names_are_equal and refs_are_empty)
        or (ref_is_contained and name_is_removed)
        or (names_are_equal and ref_is_removed)
        or is_suffix_change
    )

    # " (Ref)" -> "Name "
    needs_announce = not from_name and bool(from_ref) and bool(to_name) and not to_ref

    return not obvious_change or needs_announce
