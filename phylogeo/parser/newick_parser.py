import ast

from typing import Union, List, Dict, Tuple, Any
from phylogeo.tree import Node, index_nodes


# ===================================================================
# 1. METADATA PROCESSING FUNCTIONS
# ===================================================================


def split_token(token: str) -> Tuple[str, Any]:
    """
    Split a metadata token into key and value parts.

    Handles both "key=value" and "key:value". A bare key is treated as a
    boolean flag.
    """
    if "=" in token:
        name, value = token.split("=", 1)
    elif ":" in token:
        name, value = token.split(":", 1)
    else:
        return token, True

    try:
        parsed_value = ast.literal_eval(value)
    except (ValueError, SyntaxError):
        parsed_value = value

    return name.lstrip("&"), parsed_value


def parse_metadata(data: str) -> Dict[str, Any]:
    """
    Parse a bracketed comment body into a dictionary.

    Supports NHX (``&&NHX:country=peru:num_date=2016.5``) and the BEAST style
    ``&country="peru",num_date=2016.5``.
    """
    data = data.strip()
    if data.startswith("&&NHX:"):
        tokens = data[6:].split(":")
        result: Dict[str, Any] = {}
        for token in tokens:
            if "=" not in token:
                continue
            key, value_str = token.split("=", 1)
            try:
                if "." in value_str:
                    value: Any = float(value_str)
                else:
                    value = int(value_str)
            except ValueError:
                value = value_str
            result[key] = value
        return result

    data = data.lstrip("&")
    token_strings = [t.strip() for t in data.split(",") if t.strip()]
    return dict(split_token(token) for token in token_strings)


def flush_meta_buffer(meta_buffer: List[str], stack: List[Node]) -> None:
    metadata = parse_metadata("".join(meta_buffer))
    if metadata and stack:
        stack[-1].values.update(metadata)
    meta_buffer.clear()


# ===================================================================
# 2. BUFFER PROCESSING FUNCTIONS
# ===================================================================


def flush_character_buffer(buffer: List[str], stack: List[Node]) -> None:
    if stack and buffer:
        stack[-1].name = "".join(buffer).strip().strip("'\"")
    buffer.clear()


def flush_length_buffer(buffer: List[str], stack: List[Node]) -> None:
    """
    Assign the accumulated branch length to the current node.

    Raises:
        ValueError: If the buffer content cannot be parsed as a float
    """
    buffer_value = "".join(buffer).strip()
    buffer.clear()
    if not stack or buffer_value in {"", "null", "None"}:
        return
    try:
        stack[-1].length = float(buffer_value)
    except ValueError:
        raise ValueError(f"Invalid branch length '{buffer_value}'")


def flush_buffer(buffer: List[str], stack: List[Node], mode: str) -> None:
    if mode == "character_reader":
        flush_character_buffer(buffer, stack)
    elif mode == "length_reader":
        flush_length_buffer(buffer, stack)


# ===================================================================
# 3. NODE STACK MANAGEMENT FUNCTIONS
# ===================================================================


def init_nodestack() -> List[Node]:
    return [Node(name="", depth=0)]


def create_new_node(stack: List[Node]) -> None:
    parent = stack[-1]
    new_node = Node(depth=(parent.depth + 1 if parent.depth is not None else 1))
    parent.children.append(new_node)
    new_node.parent = parent
    stack.append(new_node)


def close_node(stack: List[Node]) -> None:
    if len(stack) <= 1:
        raise ValueError("Unbalanced parentheses in Newick string")
    stack.pop()


# ===================================================================
# 4. CORE PARSING FUNCTIONS
# ===================================================================


def _parse_newick(tokens: str) -> List[Node]:
    """Return a list of top-level Node trees from the token string."""
    trees: List[Node] = []
    buffer: List[str] = []
    meta_buffer: List[str] = []
    mode: str = "character_reader"
    node_stack: List[Node] = init_nodestack()
    # depth of open parentheses for the tree currently being read
    open_groups = 0

    for char in tokens:
        if char == "\n":
            continue

        if mode == "metadata_reader":
            if char == "]":
                flush_meta_buffer(meta_buffer, node_stack)
                mode = "character_reader"
            else:
                meta_buffer.append(char)
            continue

        if char == "(":
            if not node_stack:
                node_stack = init_nodestack()
            create_new_node(node_stack)
            open_groups += 1
            mode = "character_reader"

        elif char == ")":
            flush_buffer(buffer, node_stack, mode)
            if open_groups == 0:
                raise ValueError("Unbalanced parentheses in Newick string")
            close_node(node_stack)
            open_groups -= 1
            mode = "character_reader"

        elif char == ",":
            flush_buffer(buffer, node_stack, mode)
            close_node(node_stack)
            create_new_node(node_stack)
            mode = "character_reader"

        elif char == ":":
            flush_buffer(buffer, node_stack, mode)
            mode = "length_reader"

        elif char == "[":
            flush_buffer(buffer, node_stack, mode)
            mode = "metadata_reader"

        elif char == ";":
            flush_buffer(buffer, node_stack, mode)
            if open_groups != 0:
                raise ValueError("Unbalanced parentheses in Newick string")
            if node_stack:
                trees.append(node_stack[0])
            node_stack = []
            buffer = []
            meta_buffer = []
            mode = "character_reader"

        else:
            buffer.append(char)

    if mode == "metadata_reader":
        raise ValueError("Unterminated metadata comment in Newick string")
    if node_stack and (buffer or node_stack[0].children or node_stack[0].name):
        flush_buffer(buffer, node_stack, mode)
        if open_groups != 0:
            raise ValueError("Unbalanced parentheses in Newick string")
        trees.append(node_stack[0])

    return trees


# ===================================================================
# 5. PUBLIC API FUNCTIONS
# ===================================================================


def parse_newick(
    tokens: str, force_list: bool = False
) -> Union[Node, List[Node]]:
    """
    Parse a Newick string into a tree or list of trees.

    Node comments are read as trait annotations and stored in ``Node.values``.
    Every parsed tree gets dense pre-order ``array_idx`` values.

    Args:
        tokens: Newick format string (one or more trees separated by ';')
        force_list: Always return a list even for single trees

    Returns:
        Single Node or list of Nodes representing parsed tree(s)
    """
    trees: List[Node] = _parse_newick(tokens)
    if not trees:
        raise ValueError("No tree found in Newick string")

    for tree in trees:
        index_nodes(tree)

    if len(trees) == 1 and not force_list:
        return trees[0]
    return trees
