import pytest

from slopekit.character import (
    ACTION_ROTATE_Z,
    ACTION_SCALE,
    ACTION_TRANSLATE,
    IDENTITY,
    MAX_SPHERE_DIV,
    MIN_SPHERE_DIV,
    CharShape,
)
from slopekit.spx import Color
from slopekit.vectors import Vector3


def _flat(matrix):
    return [x for row in matrix for x in row]


@pytest.fixture
def shape():
    s = CharShape()
    s.use_actions = True
    s.create_root_node()
    s.new_actions = True
    s.create_char_node(0, 1, "neck", "Neck", "0", False)
    s.create_char_node(1, 2, "", "Body", "1", True)
    return s


def test_root_node():
    s = CharShape()
    s.create_root_node()
    assert s.num_nodes() == 1
    assert s.node_joint(0) == "root"
    assert s.node_name(0) == 0
    assert s.node_name_of("root") == 0


def test_bad_parent_raises(shape):
    with pytest.raises(ValueError):
        shape.create_char_node(42, 3, "x", "X", "", False)


def test_node_name_out_of_range(shape):
    with pytest.raises(ValueError):
        shape.create_char_node(0, 256, "x", "X", "", False)


def test_tree_structure(shape):
    assert shape.num_nodes() == 3
    assert shape.node_name_of("neck") == 1
    assert shape.nodes[0].children == [shape.nodes[1]]
    assert shape.nodes[2].parent is shape.nodes[1]
    assert shape.node_joint(2) == "2"
    assert shape.node_fullname(1) == "Neck"


def test_out_of_range_queries(shape):
    assert shape.node_joint(9) == ""
    assert shape.node_name(9) is None
    assert shape.action(9) is None
    assert shape.node_fullname(9) == ""
    with pytest.raises(IndexError):
        shape.num_acts(9)
    with pytest.raises(KeyError):
        shape.node_name_of("tail")


def test_translate_and_inverse(shape):
    assert shape.translate_node(1, Vector3(1.0, 2.0, 3.0))
    node = shape.nodes[1]
    assert node.trans[3][:3] == (1.0, 2.0, 3.0)
    assert node.invtrans[3][:3] == (-1.0, -2.0, -3.0)
    assert shape.translate_node(77, Vector3(1.0, 0.0, 0.0)) is False


def test_rotate_failures(shape):
    assert shape.rotate_node("missing", 1, 10.0) is False
    assert shape.rotate_node(1, 4, 10.0) is False
    assert shape.nodes[1].trans == IDENTITY


def test_full_turn_is_identity(shape):
    assert shape.rotate_node("neck", 3, 360.0)
    assert _flat(shape.nodes[1].trans) == pytest.approx(_flat(IDENTITY), abs=1e-9)


def test_reset_node(shape):
    shape.rotate_node("neck", 2, 45.0)
    assert shape.nodes[1].trans != IDENTITY
    assert shape.reset_node("neck")
    assert shape.nodes[1].trans == IDENTITY
    assert shape.nodes[1].invtrans == IDENTITY


def test_actions_recorded(shape):
    shape.translate_node(1, Vector3(0.5, 0.0, 0.0))
    shape.rotate_node(1, 3, 20.0)
    shape.scale_node(1, Vector3(2.0, 2.0, 2.0))
    assert shape.num_acts(1) == 3
    types = [step.type for step in shape.action(1).steps]
    assert types == [ACTION_TRANSLATE, ACTION_ROTATE_Z, ACTION_SCALE]


def test_actions_not_recorded_without_flag(shape):
    shape.new_actions = False
    shape.translate_node(1, Vector3(0.5, 0.0, 0.0))
    assert shape.num_acts(1) == 0


def test_refresh_node_rebuilds_transform(shape):
    shape.translate_node(1, Vector3(0.5, 1.0, 0.0))
    shape.rotate_node(1, 1, 30.0)
    shape.scale_node(1, Vector3(2.0, 1.0, 0.5))
    trans = _flat(shape.nodes[1].trans)
    invtrans = _flat(shape.nodes[1].invtrans)
    shape.new_actions = False
    shape.reset_node(1)
    assert shape.nodes[1].trans == IDENTITY
    shape.refresh_node(1)
    assert _flat(shape.nodes[1].trans) == pytest.approx(trans, abs=1e-9)
    assert _flat(shape.nodes[1].invtrans) == pytest.approx(invtrans, abs=1e-9)


def test_visible_node_divisions(shape):
    assert shape.visible_node(1, 10.0)
    assert shape.nodes[1].visible
    assert shape.nodes[1].divisions == shape.sphere_divisions
    shape.visible_node(1, 100.0)
    assert shape.nodes[1].divisions == MAX_SPHERE_DIV
    shape.visible_node(1, 0.1)
    assert shape.nodes[1].divisions == MIN_SPHERE_DIV
    shape.visible_node(1, 0.0)
    assert shape.nodes[1].visible is False


def test_materials(shape):
    mat = shape.create_material("*[material] 1 [mat] red [diff] 1 0 0 [spec] 0 0 0 [exp] 20")
    assert shape.material("red") is mat
    assert mat.diffuse == Color(255, 0, 0, 255)
    assert mat.exp == 20.0
    assert shape.material_node(1, "red")
    assert shape.nodes[1].mat is mat
    assert shape.action(1).mat == "red"
    assert shape.material_node(1, "blue") is False


def test_reset(shape):
    shape.create_material("*[material] 1 [mat] red [diff] 1 0 0")
    shape.reset()
    assert shape.num_nodes() == 0
    assert shape.material("red") is None
    assert shape.use_actions is True
    assert shape.highlight_node is None


def test_adjust_joints_and_reset_joints():
    s = CharShape()
    s.create_root_node()
    s.create_char_node(0, 1, "left_hip", "", "", False)
    s.create_char_node(0, 2, "head", "", "", False)
    s.adjust_joints(0.5, True, 0.25, 10.0, Vector3(0.0, 0.0, 100.0), 0.0)
    assert s.nodes[1].trans != IDENTITY
    assert s.nodes[2].trans != IDENTITY
    assert s.nodes[0].trans == IDENTITY
    s.reset_joints()
    assert s.nodes[1].trans == IDENTITY
    assert s.nodes[2].trans == IDENTITY


def test_adjust_joints_is_repeatable():
    s = CharShape()
    s.create_root_node()
    s.create_char_node(0, 1, "tail", "", "", False)
    s.adjust_joints(-0.3, False, 0.1, 5.0, Vector3(), 0.2)
    first = _flat(s.nodes[1].trans)
    assert first != pytest.approx(_flat(IDENTITY), abs=1e-9)
    s.adjust_joints(-0.3, False, 0.1, 5.0, Vector3(), 0.2)
    assert _flat(s.nodes[1].trans) == pytest.approx(first, abs=1e-9)