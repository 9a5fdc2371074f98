"""Character shapes built from a tree of transformed, sphere-shaped nodes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Union

from slopekit.spx import Color, sp_float, sp_str, sp_vector3
from slopekit.vectors import Vector3

MAX_ACTIONS = 8
MAX_CHAR_NODES = 256
MIN_SPHERE_DIV = 3
MAX_SPHERE_DIV = 16
DEFAULT_SPHERE_DIVISIONS = 15

MAX_ARM_ANGLE2 = 30.0
MAX_PADDLING_ANGLE2 = 35.0
MAX_EXT_PADDLING_ANGLE2 = 30.0
MAX_KICK_PADDLING_ANGLE2 = 20.0

ACTION_TRANSLATE = 0
ACTION_ROTATE_X = 1
ACTION_ROTATE_Y = 2
ACTION_ROTATE_Z = 3
ACTION_SCALE = 4
ACTION_VISIBLE = 5

JOINTS = (
    "left_shldr",
    "right_shldr",
    "left_hip",
    "right_hip",
    "left_knee",
    "right_knee",
    "left_ankle",
    "right_ankle",
    "tail",
    "neck",
    "head",
)

Matrix = tuple[tuple[float, float, float, float], ...]
NodeRef = Union[int, str]

IDENTITY: Matrix = (
    (1.0, 0.0, 0.0, 0.0),
    (0.0, 1.0, 0.0, 0.0),
    (0.0, 0.0, 1.0, 0.0),
    (0.0, 0.0, 0.0, 1.0),
)


def _mat_mul(a: Matrix, b: Matrix) -> Matrix:
    cols = tuple(zip(*b))
    return tuple(
        tuple(sum(x * y for x, y in zip(row, col)) for col in cols) for row in a
    )


def _translation(x: float, y: float, z: float) -> Matrix:
    return (
        (1.0, 0.0, 0.0, 0.0),
        (0.0, 1.0, 0.0, 0.0),
        (0.0, 0.0, 1.0, 0.0),
        (float(x), float(y), float(z), 1.0),
    )


def _scaling(x: float, y: float, z: float) -> Matrix:
    return (
        (float(x), 0.0, 0.0, 0.0),
        (0.0, float(y), 0.0, 0.0),
        (0.0, 0.0, float(z), 0.0),
        (0.0, 0.0, 0.0, 1.0),
    )


def _rotation(angle: float, axis: int) -> Matrix:
    """Rotation by ``angle`` degrees about axis 1 (x), 2 (y) or 3 (z)."""
    rad = math.radians(angle)
    c, s = math.cos(rad), math.sin(rad)
    if axis == 1:
        return ((1.0, 0.0, 0.0, 0.0), (0.0, c, s, 0.0), (0.0, -s, c, 0.0), (0.0, 0.0, 0.0, 1.0))
    if axis == 2:
        return ((c, 0.0, -s, 0.0), (0.0, 1.0, 0.0, 0.0), (s, 0.0, c, 0.0), (0.0, 0.0, 0.0, 1.0))
    if axis == 3:
        return ((c, s, 0.0, 0.0), (-s, c, 0.0, 0.0), (0.0, 0.0, 1.0, 0.0), (0.0, 0.0, 0.0, 1.0))
    return IDENTITY


def _lround(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _unit_to_byte(value: float) -> int:
    return max(0, min(255, int(value * 255)))


@dataclass
class CharMaterial:
    diffuse: Color = field(default_factory=lambda: Color(128, 128, 128))
    specular: Color = field(default_factory=lambda: Color(0, 0, 0))
    exp: float = 0.0
    matline: str = ""


@dataclass
class ActionStep:
    """One recorded transformation of a node."""

    type: int
    vec: Vector3 = field(default_factory=Vector3)
    dval: float = 0.0


@dataclass
class CharAction:
    """The transformations that build a node, kept for editing and saving."""

    name: str = ""
    order: str = ""
    mat: str = ""
    steps: list[ActionStep] = field(default_factory=list)

    @property
    def num(self) -> int:
        return len(self.steps)


@dataclass(eq=False)
class CharNode:
    node_name: int
    parent: Optional["CharNode"] = None
    parent_name: int = 99
    children: list["CharNode"] = field(default_factory=list)
    action: Optional[CharAction] = None
    node_idx: int = 0
    joint: str = ""
    trans: Matrix = IDENTITY
    invtrans: Matrix = IDENTITY
    radius: float = 1.0
    mat: Optional[CharMaterial] = None
    divisions: int = 0
    render_shadow: bool = False
    visible: bool = False


class CharShape:
    """A character: a tree of nodes, its materials and optional edit actions."""

    def __init__(self, sphere_divisions: int = DEFAULT_SPHERE_DIVISIONS) -> None:
        self.sphere_divisions = sphere_divisions
        self.nodes: list[CharNode] = []
        self._index: dict[int, int] = {}
        self.materials: list[CharMaterial] = []
        self.material_index: dict[str, int] = {}
        self.node_index: dict[str, int] = {}
        self.use_actions = False
        self.new_actions = False
        self.use_materials = True
        self.use_highlighting = False
        self.highlighted = False
        self.highlight_node: Optional[int] = None

    # ----- nodes ---------------------------------------------------------

    def _get_node(self, node_name: int) -> Optional[CharNode]:
        idx = self._index.get(node_name)
        if idx is None or idx >= len(self.nodes):
            return None
        return self.nodes[idx]

    def _resolve(self, node: NodeRef) -> Optional[int]:
        if isinstance(node, str):
            return self.node_index.get(node)
        return node

    def _record(self, node_name: int, type_: int, vec: Vector3, val: float) -> None:
        if not (self.new_actions and self.use_actions):
            return
        action = self.nodes[self._index[node_name]].action
        if action.num >= MAX_ACTIONS:
            raise IndexError(f"node {node_name} has more than {MAX_ACTIONS} actions")
        action.steps.append(ActionStep(type_, Vector3(vec.x, vec.y, vec.z), val))

    def create_root_node(self) -> None:
        """Start a fresh tree holding only the root node 0."""
        root = CharNode(node_name=0, joint="root")
        self.node_index = {"root": 0}
        self._index = {0: 0}
        self.nodes = [root]

    def create_char_node(
        self,
        parent_name: int,
        node_name: int,
        joint: str,
        name: str,
        order: str,
        shadow: bool,
    ) -> CharNode:
        """Add a node below ``parent_name``. Raises ValueError on a bad node."""
        parent = self._get_node(parent_name)
        if parent is None:
            raise ValueError(f"wrong parent node {parent_name}")
        if not 0 <= node_name < MAX_CHAR_NODES:
            raise ValueError(f"node name {node_name} out of range")
        node = CharNode(
            node_name=node_name,
            parent=parent,
            parent_name=parent_name,
            action=CharAction(name=name, order=order) if self.use_actions else None,
            node_idx=len(self.nodes),
            joint=joint,
            render_shadow=shadow,
        )
        if joint:
            self.node_index[joint] = node_name
        self._index[node_name] = len(self.nodes)
        self.nodes.append(node)
        parent.children.append(node)
        return node

    def reset_node(self, node: NodeRef) -> bool:
        """Set a node's transformation to identity; False if it is unknown."""
        target = self._resolve(node)
        found = None if target is None else self._get_node(target)
        if found is None:
            return False
        found.trans = IDENTITY
        found.invtrans = IDENTITY
        return True

    def _apply(self, node: CharNode, mat: Matrix, inv: Matrix) -> None:
        node.trans = _mat_mul(node.trans, mat)
        node.invtrans = _mat_mul(inv, node.invtrans)

    def translate_node(self, node_name: int, vec: Vector3) -> bool:
        node = self._get_node(node_name)
        if node is None:
            return False
        self._apply(
            node, _translation(vec.x, vec.y, vec.z), _translation(-vec.x, -vec.y, -vec.z)
        )
        self._record(node_name, ACTION_TRANSLATE, vec, 0.0)
        return True

    def rotate_node(self, node: NodeRef, axis: int, angle: float) -> bool:
        """Rotate by ``angle`` degrees about axis 1, 2 or 3 (x, y, z)."""
        node_name = self._resolve(node)
        target = None if node_name is None else self._get_node(node_name)
        if target is None or axis > 3:
            return False
        self._apply(target, _rotation(angle, axis), _rotation(-angle, axis))
        self._record(node_name, axis, Vector3(), angle)
        return True

    def scale_node(self, node_name: int, vec: Vector3) -> bool:
        node = self._get_node(node_name)
        if node is None:
            return False
        self._apply(
            node,
            _scaling(vec.x, vec.y, vec.z),
            _scaling(1.0 / vec.x, 1.0 / vec.y, 1.0 / vec.z),
        )
        self._record(node_name, ACTION_SCALE, vec, 0.0)
        return True

    def visible_node(self, node_name: int, level: float) -> bool:
        """Show the node if ``level`` is positive, with detail scaled by it."""
        node = self._get_node(node_name)
        if node is None:
            return False
        node.visible = level > 0
        if node.visible:
            divisions = _lround(self.sphere_divisions * level / 10)
            node.divisions = max(MIN_SPHERE_DIV, min(divisions, MAX_SPHERE_DIV))
            node.radius = 1.0
        self._record(node_name, ACTION_VISIBLE, Vector3(), level)
        return True

    def material_node(self, node_name: int, mat_name: str) -> bool:
        node = self._get_node(node_name)
        if node is None:
            return False
        mat = self.material(mat_name)
        if mat is None:
            return False
        node.mat = mat
        if self.new_actions and self.use_actions:
            node.action.mat = mat_name
        return True

    def _transform_node(self, node_name: int, mat: Matrix, invmat: Matrix) -> bool:
        node = self._get_node(node_name)
        if node is None:
            return False
        self._apply(node, mat, invmat)
        return True

    def reset_root(self) -> None:
        self.reset_node(0)

    def reset_joints(self) -> None:
        for joint in JOINTS:
            self.reset_node(joint)

    def reset(self) -> None:
        """Drop all nodes and materials and return to editing defaults."""
        self.nodes = []
        self._index = {}
        self.materials = []
        self.node_index = {}
        self.material_index = {}
        self.use_actions = True
        self.new_actions = False
        self.use_materials = True
        self.use_highlighting = False
        self.highlighted = False
        self.highlight_node = None

    # ----- materials -------------------------------------------------------

    def material(self, mat_name: str) -> Optional[CharMaterial]:
        idx = self.material_index.get(mat_name)
        if idx is None or idx >= len(self.materials):
            return None
        return self.materials[idx]

    def create_material(self, line: str) -> CharMaterial:
        """Add a material from a line with ``[mat]``, ``[diff]``, ``[spec]``, ``[exp]``."""
        diff = sp_vector3(line, "diff")
        spec = sp_vector3(line, "spec")
        mat = CharMaterial(
            diffuse=Color(*(_unit_to_byte(c) for c in diff), 255),
            specular=Color(*(_unit_to_byte(c) for c in spec), 255),
            exp=sp_float(line, "exp", 50),
            matline=line if self.use_actions else "",
        )
        self.materials.append(mat)
        self.material_index[sp_str(line, "mat")] = len(self.materials) - 1
        return mat

    # ----- queries -----------------------------------------------------------

    def num_nodes(self) -> int:
        return len(self.nodes)

    def node_name(self, idx: int) -> Optional[int]:
        if not 0 <= idx < len(self.nodes):
            return None
        return self.nodes[idx].node_name

    def node_name_of(self, joint: str) -> int:
        """Node name of a joint; raises KeyError if there is none."""
        return self.node_index[joint]

    def node_joint(self, idx: int) -> str:
        if not 0 <= idx < len(self.nodes):
            return ""
        node = self.nodes[idx]
        return node.joint or str(node.node_name)

    def node_fullname(self, idx: int) -> str:
        if not 0 <= idx < len(self.nodes) or self.nodes[idx].action is None:
            return ""
        return self.nodes[idx].action.name

    def num_acts(self, idx: int) -> int:
        """Number of recorded actions of node ``idx``; IndexError if absent."""
        if not 0 <= idx < len(self.nodes):
            raise IndexError(f"no node at index {idx}")
        action = self.nodes[idx].action
        return 0 if action is None else action.num

    def action(self, idx: int) -> Optional[CharAction]:
        if not 0 <= idx < len(self.nodes):
            return None
        return self.nodes[idx].action

    def refresh_node(self, idx: int) -> None:
        """Rebuild the node's transformation from its recorded actions."""
        if not 0 <= idx < len(self.nodes):
            return
        node = self.nodes[idx]
        act = node.action
        if act is None or act.num < 1:
            return
        node.trans = IDENTITY
        node.invtrans = IDENTITY
        for step in act.steps:
            vec = step.vec
            if step.type == ACTION_TRANSLATE:
                self._apply(
                    node,
                    _translation(vec.x, vec.y, vec.z),
                    _translation(-vec.x, -vec.y, -vec.z),
                )
            elif step.type in (ACTION_ROTATE_X, ACTION_ROTATE_Y, ACTION_ROTATE_Z):
                self._apply(
                    node, _rotation(step.dval, step.type), _rotation(-step.dval, step.type)
                )
            elif step.type == ACTION_SCALE:
                self._apply(
                    node,
                    _scaling(vec.x, vec.y, vec.z),
                    _scaling(1.0 / vec.x, 1.0 / vec.y, 1.0 / vec.z),
                )
            elif step.type == ACTION_VISIBLE:
                self.visible_node(node.node_name, step.dval)

    # ----- animation ---------------------------------------------------------

    def adjust_joints(
        self,
        turn_fact: float,
        is_braking: bool,
        paddling_factor: float,
        speed: float,
        net_force: Vector3,
        flap_factor: float,
    ) -> None:
        """Pose the limbs for the given steering, braking and paddling."""
        braking_angle = MAX_ARM_ANGLE2 if is_braking else 0.0
        paddle_sin = math.sin(paddling_factor * math.pi)
        paddling_angle = MAX_PADDLING_ANGLE2 * paddle_sin
        ext_paddling_angle = MAX_EXT_PADDLING_ANGLE2 * paddle_sin
        kick_paddling_angle = MAX_KICK_PADDLING_ANGLE2 * math.sin(
            paddling_factor * math.pi * 2.0
        )
        turn_left = max(-turn_fact, 0.0) * MAX_ARM_ANGLE2
        turn_right = max(turn_fact, 0.0) * MAX_ARM_ANGLE2
        flap_angle = MAX_ARM_ANGLE2 * (
            0.5 + 0.5 * math.sin(math.pi * flap_factor * 6 - math.pi / 2)
        )
        force_angle = max(-20.0, min(-net_force.z / 300.0, 20.0))
        turn_leg_angle = turn_fact * 10

        self.reset_joints()

        self.rotate_node(
            "left_shldr", 3,
            min(braking_angle + paddling_angle + turn_left, MAX_ARM_ANGLE2) + flap_angle,
        )
        self.rotate_node(
            "right_shldr", 3,
            min(braking_angle + paddling_angle + turn_right, MAX_ARM_ANGLE2) + flap_angle,
        )
        self.rotate_node("left_shldr", 2, -ext_paddling_angle)
        self.rotate_node("right_shldr", 2, ext_paddling_angle)
        self.rotate_node("left_hip", 3, -20 + turn_leg_angle + force_angle)
        self.rotate_node("right_hip", 3, -20 - turn_leg_angle + force_angle)
        self.rotate_node(
            "left_knee", 3,
            -10 + turn_leg_angle - min(35.0, speed) + kick_paddling_angle + force_angle,
        )
        self.rotate_node(
            "right_knee", 3,
            -10 - turn_leg_angle - min(35.0, speed) - kick_paddling_angle + force_angle,
        )
        self.rotate_node("left_ankle", 3, -20 + min(50.0, speed))
        self.rotate_node("right_ankle", 3, -20 + min(50.0, speed))
        self.rotate_node("tail", 3, turn_fact * 20)
        self.rotate_node("neck", 3, -50)
        self.rotate_node("head", 3, -30)
        self.rotate_node("head", 2, -turn_fact * 70)