"""
Tree walker for parsed Zig sources.

Walks every node of a syntax tree and decides whether it declares something
worth a tag:
- Function declarations (prototypes without a body are skipped)
- Variable and constant declarations (refined to struct/enum/union when the
  initializer is a container)
- Container fields

`@import("*.zig")` calls are reported back to the caller so it can follow
them.
"""

from .parser import iter_nodes
from .tags import Kind

SOURCE_EXTENSION = ".zig"
DISCARD_NAME = "_"
IMPORT_BUILTIN = "import"

FUNCTION_DECLARATION = "function_declaration"
CONTAINER_FIELD = "container_field"
BUILTIN_CALL = "builtin_function"

# Nodes whose children can hold `const`/`var` declaration headers: the
# declaration itself, and statement lists where a local or destructuring
# declaration is spelled inline.
VAR_DECL_SCOPES = frozenset({
    "variable_declaration",
    "block",
    "comptime_statement",
})

DECL_KEYWORDS = frozenset({"const", "var"})

DECL_MODIFIERS = frozenset({
    "pub",
    "export",
    "extern",
    "inline",
    "noinline",
    "threadlocal",
    "comptime",
})

CONTAINER_DECLARATIONS = frozenset({
    "struct_declaration",
    "enum_declaration",
    "union_declaration",
    "opaque_declaration",
})

# Keyed by the container keyword's first character; `opaque` drops the entry
CONTAINER_KINDS = {
    "s": Kind.STRUCT,
    "e": Kind.ENUM,
    "u": Kind.UNION,
}

STATEMENT_END = frozenset({";", ","})


def unquote_identifier(name):
    """@"name" -> name"""
    if name.startswith('@"'):
        return name[1:].strip('"')
    return name


def get_node_text(tree, start, end):
    """First source line of bytes start..end, anchored with ^/$ where it meets line boundaries."""
    source = tree.source
    text = source[start:end]
    newline = text.find(b"\n")
    if newline != -1:
        text = text[:newline]

    start_of_line = "^" if start == 0 or source[start - 1:start] == b"\n" else ""
    text_end = start + len(text)
    end_of_line = "$" if source[text_end:text_end + 1] == b"\n" else ""
    return f"{start_of_line}{text.decode('utf-8', errors='replace')}{end_of_line}"


def _is_modifier(node):
    if node.type in DECL_MODIFIERS:
        return True
    # extern "c" fn ...
    return node.type == "string" and node.prev_sibling is not None and node.prev_sibling.type == "extern"


def declaration_start(node):
    """Start byte of `node`, widened over the `pub`/`extern "c"`/... modifiers in front of it."""
    start = node.start_byte
    while True:
        sibling = node.prev_sibling
        if sibling is None:
            parent = node.parent
            if parent is None or parent.type != "variable_declaration":
                return start
            node = parent
            continue
        if not _is_modifier(sibling):
            return start
        start = sibling.start_byte
        node = sibling


def content_end(node):
    """End byte of `node` without its trailing `;` or `,`."""
    children = node.children
    while children and children[-1].type in STATEMENT_END:
        children = children[:-1]
    return children[-1].end_byte if children else node.end_byte


def builtin_name(tree, node):
    for child in node.children:
        if child.type == "builtin_identifier":
            return tree.text(child)
    return None


def import_target(tree, node):
    """Return the file named by an @import("x.zig") call node, or None."""
    if builtin_name(tree, node) != "@" + IMPORT_BUILTIN:
        return None
    args = next((c for c in node.named_children if c.type == "arguments"), None)
    if args is None:
        return None
    first = next((c for c in args.named_children if c.type != "comment"), None)
    if first is None or first.type != "string":
        return None
    name = tree.text(first).strip('"')
    if name.endswith(SOURCE_EXTENSION):
        return name
    return None


def _is_header(children, index):
    return (
        children[index].type in DECL_KEYWORDS
        and index + 1 < len(children)
        and children[index + 1].type == "identifier"
    )


def _next_named(children, index):
    for child in children[index:]:
        if child.is_named and child.type != "comment":
            return child
    return None


def iter_var_decls(node):
    """Yield (keyword, name, initializer, end) for each declaration header among `node`'s children.

    `const a, var b = ...` destructures: each header ends before its comma and
    has no initializer of its own.
    """
    children = node.children
    index = 0
    while index < len(children):
        if not _is_header(children, index):
            index += 1
            continue

        headers = [index]
        stop = index + 2
        while stop < len(children) and children[stop].type not in ("=", ";"):
            if _is_header(children, stop):
                headers.append(stop)
            stop += 1

        if len(headers) == 1:
            initializer = None
            if stop < len(children) and children[stop].type == "=":
                initializer = _next_named(children, stop + 1)
            while stop < len(children) and children[stop].type != ";":
                stop += 1
            yield children[index], children[index + 1], initializer, children[stop - 1].end_byte
        else:
            for header in headers:
                last = header + 1
                while last + 1 < stop and children[last + 1].type != ",":
                    last += 1
                yield children[header], children[header + 1], None, children[last].end_byte

        index = stop + 1


def classify_var_decl(tree, keyword, name, initializer):
    """Kind of a var decl after looking at its initializer, or None to drop it."""
    kind = Kind.CONSTANT if keyword.type == "const" else Kind.VARIABLE
    if initializer is None:
        return kind

    if initializer.type in CONTAINER_DECLARATIONS:
        return CONTAINER_KINDS.get(initializer.type[0])
    if initializer.type == BUILTIN_CALL:
        # const foo = @import("foo"); is just noise
        if builtin_name(tree, initializer) == "@" + IMPORT_BUILTIN:
            return None
    elif initializer.type == "field_expression":
        # const foo = SomeContainer.foo; only aliases a field
        member = initializer.child_by_field_name("member")
        if member is not None and tree.text(member) == name:
            return None
    return kind


def field_name(node):
    """Name token of a container field; enum members only carry a type slot."""
    name = node.child_by_field_name("name")
    if name is None:
        name = node.child_by_field_name("type")
        if name is None or name.type != "identifier":
            return None
    return name


def walk_tree(tree, filename, store):
    """Add tag entries for `tree` to `store` and yield the files it imports."""
    for node in iter_nodes(tree.root_node):
        kind = node.type

        if kind == BUILTIN_CALL:
            target = import_target(tree, node)
            if target is not None:
                yield target

        elif kind == FUNCTION_DECLARATION:
            name = node.child_by_field_name("name")
            if name is None or node.children[-1].type != "block":
                continue
            text = get_node_text(tree, declaration_start(node), content_end(node))
            store.add(tree.text(name), filename, text, Kind.FUNCTION)

        elif kind == CONTAINER_FIELD:
            name = field_name(node)
            if name is None:
                continue
            ident = unquote_identifier(tree.text(name))
            if not ident or ident == DISCARD_NAME:
                continue
            text = get_node_text(tree, declaration_start(node), content_end(node))
            store.add(ident, filename, text, Kind.FIELD)

        if kind in VAR_DECL_SCOPES:
            for keyword, name, initializer, end in iter_var_decls(node):
                ident = tree.text(name)
                if ident == DISCARD_NAME:
                    continue
                ident = unquote_identifier(ident)
                if not ident:
                    continue
                decl_kind = classify_var_decl(tree, keyword, ident, initializer)
                if decl_kind is None:
                    continue
                store.add(ident, filename, get_node_text(tree, declaration_start(keyword), end), decl_kind)
