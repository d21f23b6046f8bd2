from typing import List, Optional

from .ast_nodes import ASTNode, Number, Identifier, Boolean, UnaryOp, BinaryOp, Assign, If, Program


def _escape(text: str) -> str:
    # labels carry DOT '\n' escapes on purpose, only quotes need escaping
    return str(text).replace('"', '\\"')


class ASTVisualizer:
    """Renders an AST as Graphviz DOT text."""

    def __init__(self):
        self.lines: List[str] = list()
        self.node_count: int = 0

    def generate_dot(self, ast_node: ASTNode) -> str:
        self.lines = [
            'digraph AST {',
            '  node [shape=box, fontname="Arial", fontsize=10];',
            '  edge [fontname="Arial", fontsize=8];',
            '',
        ]
        self.node_count = 0
        self.build_graph(ast_node)
        self.lines.append('}')
        return '\n'.join(self.lines) + '\n'

    def save_dot(self, path: str, ast_node: ASTNode):
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.generate_dot(ast_node))

    def add_node(self, label: str, attributes: str = '') -> str:
        node_id = f'node{self.node_count}'
        self.node_count += 1
        self.lines.append(f'  {node_id} [label="{_escape(label)}"{attributes}];')
        return node_id

    def add_edge(self, parent_id: str, child: Optional[ASTNode], label: str):
        if child is None:
            return
        child_id = self.build_graph(child)
        self.lines.append(f'  {parent_id} -> {child_id} [label="{label}"];')

    def build_graph(self, ast_node: ASTNode) -> str:
        if isinstance(ast_node, Number):
            node_id = self.add_node(f'Number\\n{ast_node.value!r}')
        elif isinstance(ast_node, Identifier):
            node_id = self.add_node(f'Identifier\\n{ast_node.name}')
        elif isinstance(ast_node, Boolean):
            node_id = self.add_node(f'Boolean\\n{ast_node!r}')
        elif isinstance(ast_node, UnaryOp):
            node_id = self.add_node(f'UnaryOp\\n{ast_node.operator}')
            self.add_edge(node_id, ast_node.operand, 'expr')
        elif isinstance(ast_node, BinaryOp):
            node_id = self.add_node(f'BinaryOp\\n{ast_node.operator}')
            self.add_edge(node_id, ast_node.left, 'left')
            self.add_edge(node_id, ast_node.right, 'right')
        elif isinstance(ast_node, Assign):
            node_id = self.add_node(f'Assign\\n{ast_node.variable}')
            self.add_edge(node_id, ast_node.value, 'expr')
        elif isinstance(ast_node, If):
            node_id = self.add_node('If', ', shape=diamond')
            self.add_edge(node_id, ast_node.condition, 'condition')
            self.add_edge(node_id, ast_node.then_branch, 'then')
            self.add_edge(node_id, ast_node.else_branch, 'else')
        elif isinstance(ast_node, Program):
            node_id = self.add_node('Program', ', shape=ellipse, color=blue')
            for index, statement in enumerate(ast_node.statements):
                self.add_edge(node_id, statement, f'stmt {index}')
        else:
            node_id = self.add_node(f'Unknown\\n{type(ast_node).__name__}', ', color=red')
        return node_id
