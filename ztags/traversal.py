"""
Import-following traversal.

Starting from one file, parses it, tags its declarations and recurses into
every `@import("*.zig")` it contains, resolved against the importing file's
directory. Every file is processed at most once per run: the path is marked
visited before its imports are followed, which breaks import cycles and
collapses diamond imports.
"""

import os
import stat

import networkx as nx

from . import krono
from .errors import NotFileError, ParseError
from .parser import parse
from .tags import Tags
from .walker import walk_tree


def read_source(path):
    """Return the contents of `path` as UTF-8 checked bytes, or None for an empty file."""
    st = os.stat(path)
    if stat.S_ISDIR(st.st_mode):
        raise NotFileError(path)
    if st.st_size == 0:
        return None

    with open(path, "rb") as f:
        data = f.read()
    try:
        data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"invalid UTF-8 ({e.reason})", path=path) from e
    return data


def resolve_import(importer, name):
    directory = os.path.dirname(importer)
    return os.path.normpath(f"{directory}/{name}")


class TagFinder:
    """Traversal context: the tag store plus the import graph seen so far."""

    def __init__(self, store=None):
        self.store = store if store is not None else Tags()
        self.graph = nx.DiGraph()

    def find_tags(self, path):
        path = os.path.abspath(path)
        if not self.store.visit(path):
            return

        start = krono.now()
        source = read_source(path)
        self.graph.add_node(path)
        if source is None:
            krono.trace(f"{path}: empty")
            return

        try:
            tree = parse(source)
        except ParseError as e:
            raise e.with_path(path) from e

        count = len(self.store)
        for name in walk_tree(tree, path, self.store):
            target = resolve_import(path, name)
            try:
                self.find_tags(target)
            except FileNotFoundError:
                # Forget it again so naming it as a start file still fails loudly
                self.store.visited.pop(target, None)
                krono.trace(f"{path}: skipping missing import {name}")
                continue
            if target in self.graph:
                self.graph.add_edge(path, target)

        krono.trace(f"{path}: {len(self.store) - count} tags in {krono.now() - start:.2f}ms")

    def imports(self):
        """Import graph as {file: [imported files]}."""
        return {node: sorted(self.graph.successors(node)) for node in sorted(self.graph.nodes)}

    def import_cycles(self):
        return sorted(sorted(cycle) for cycle in nx.simple_cycles(self.graph))


def find_tags(paths, store=None):
    """Index every file in `paths` (and everything they import) into one store."""
    finder = TagFinder(store)
    for path in paths:
        finder.find_tags(path)
    return finder.store
