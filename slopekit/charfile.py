"""Reading and writing character shape files (``shape.lst``)."""

from __future__ import annotations

import logging
from typing import Union

import os

from slopekit.character import (
    ACTION_ROTATE_X,
    ACTION_ROTATE_Y,
    ACTION_ROTATE_Z,
    ACTION_SCALE,
    ACTION_TRANSLATE,
    ACTION_VISIBLE,
    ActionStep,
    CharShape,
)
from slopekit.spx import (
    SPList,
    int_str,
    sp_bool,
    sp_float,
    sp_int,
    sp_str,
    sp_vector3,
    vector_str,
)
from slopekit.vectors import Vector3

PathLike = Union[str, "os.PathLike[str]"]

HEADER = "# Generated by character tools"
ORDER_ROTATE_Z_AS_Y = 9

_log = logging.getLogger(__name__)


def _action_code(ch: str) -> int:
    return ord(ch) - ord("0")


def _load_node(shape: CharShape, line: str) -> None:
    node_name = sp_int(line, "node", -1)
    parent_name = sp_int(line, "par", -1)
    mat_name = sp_str(line, "mat")
    joint = sp_str(line, "joint")
    fullname = sp_str(line, "name")
    visible = sp_float(line, "vis", -1.0)
    shadow = sp_bool(line, "shad", False)
    order = sp_str(line, "order")

    shape.create_char_node(parent_name, node_name, joint, fullname, order, shadow)
    rot = sp_vector3(line, "rot")
    shape.material_node(node_name, mat_name)

    for ch in order:
        code = _action_code(ch)
        if code == ACTION_TRANSLATE:
            shape.translate_node(node_name, sp_vector3(line, "trans"))
        elif code == ACTION_ROTATE_X:
            shape.rotate_node(node_name, 1, rot.x)
        elif code == ACTION_ROTATE_Y:
            shape.rotate_node(node_name, 2, rot.y)
        elif code == ACTION_ROTATE_Z:
            shape.rotate_node(node_name, 3, rot.z)
        elif code == ACTION_SCALE:
            shape.scale_node(
                node_name, sp_vector3(line, "scale", Vector3(1.0, 1.0, 1.0))
            )
        elif code == ACTION_VISIBLE:
            shape.visible_node(node_name, visible)
        elif code == ORDER_ROTATE_Z_AS_Y:
            shape.rotate_node(node_name, 2, rot.z)


def load_character(shape: CharShape, path: PathLike, with_actions: bool) -> CharShape:
    """Build ``shape`` from a character file and return it.

    Lines with ``[material]`` above zero define materials; every other line
    defines a node whose ``[order]`` lists the transformations to apply.
    Raises OSError if the file cannot be read and ValueError on a node with
    an unknown parent.
    """
    shape.use_actions = with_actions
    shape.create_root_node()
    shape.new_actions = True
    try:
        lines = SPList()
        lines.load(path)
        for line in lines:
            if sp_int(line, "material", 0) > 0:
                shape.create_material(line)
            else:
                _load_node(shape, line)
    finally:
        shape.new_actions = False
    return shape


def _step(steps: list[ActionStep], position: int) -> ActionStep:
    if position < len(steps):
        return steps[position]
    return ActionStep(ACTION_TRANSLATE)


def _node_line(shape: CharShape, idx: int) -> str:
    node = shape.nodes[idx]
    act = node.action
    if act is None:
        raise ValueError("character has no recorded actions; load it with actions")
    if node.parent_name >= node.node_name:
        _log.warning("wrong parent index for node %d", node.node_name)

    parts = [f"*[node] {int_str(node.node_name)}", f"[par] {int_str(node.parent_name)}"]
    if act.order:
        rotation = Vector3(0.0, 0.0, 0.0)
        has_rotation = False
        parts.append(f"[order] {act.order}")
        for position, ch in enumerate(act.order):
            step = _step(act.steps, position)
            code = _action_code(ch)
            if code == ACTION_TRANSLATE:
                parts.append(f"[trans] {vector_str(step.vec, 2)}")
            elif code == ACTION_SCALE:
                parts.append(f"[scale] {vector_str(step.vec, 2)}")
            elif code == ACTION_ROTATE_X:
                rotation.x = step.dval
                has_rotation = True
            elif code == ACTION_ROTATE_Y:
                rotation.y = step.dval
                has_rotation = True
            elif code in (ACTION_ROTATE_Z, ORDER_ROTATE_Z_AS_Y):
                rotation.z = step.dval
                has_rotation = True
            elif code == ACTION_VISIBLE:
                parts.append(f"[vis] {int_str(int(step.dval))}")
        if has_rotation:
            parts.append(f"[rot] {vector_str(rotation, 2)}")
    if act.mat:
        parts.append(f"[mat] {act.mat}")
    if node.joint:
        parts.append(f"[joint] {node.joint}")
    if act.name:
        parts.append(f"[name] {act.name}")
    if node.render_shadow:
        parts.append("[shad] 1")
    return " ".join(parts)


def save_character(shape: CharShape, path: PathLike) -> None:
    """Write the materials and nodes of ``shape`` as a character file.

    The shape must have been loaded with actions. Raises ValueError if it
    was not and OSError if the file cannot be written.
    """
    lines = SPList()
    lines.add(HEADER)
    lines.add()
    if shape.materials:
        lines.add("# Materials:")
        lines.extend(mat.matline for mat in shape.materials if mat.matline)
        lines.add()

    lines.add("# Nodes:")
    count = len(shape.nodes)
    for idx in range(1, count):
        lines.add(_node_line(shape, idx))
        if idx < count - 3:
            node = shape.nodes[idx]
            if node.visible and not shape.nodes[idx + 1].visible:
                lines.add()
            joint = shape.nodes[idx + 2].joint
            if not joint:
                lines.add("# " + joint)
    lines.save(path)