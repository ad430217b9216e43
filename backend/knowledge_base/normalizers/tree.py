from .page import normalize_page


def normalize_tree(nodes):
    """TreeNode forest → nested JSON; content is left out of sidebar payloads."""
    return [
        {
            **normalize_page(node.page, include_content=False),
            "children": normalize_tree(node.children),
        }
        for node in nodes
    ]
