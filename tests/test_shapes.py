import math

import numpy as np
import pytest

from cps import (
    Circle,
    Compound,
    CompoundHorizontal,
    CompoundLayered,
    CompoundVertical,
    CyclicComposition,
    Diamond,
    EmptyComposition,
    Horizontal,
    InvalidAngle,
    InvalidGeometry,
    InvalidScaleFactor,
    Layered,
    Line,
    Polygon,
    Rectangle,
    RotationAngle,
    Rotated,
    Scaled,
    ShapeError,
    Spacer,
    Square,
    Triangle,
    Vertical,
    footprints,
    outline_bounds,
    walk,
)


class TestPrimitives:
    def test_circle_footprint_is_diameter(self) -> None:
        c = Circle(5)
        assert c.width == pytest.approx(10)
        assert c.height == pytest.approx(10)
        assert c.radius == 5

    def test_square_and_triangle_footprints(self) -> None:
        sq = Square(10)
        assert sq.num_sides == 4
        assert sq.width == pytest.approx(10)
        assert sq.height == pytest.approx(10)
        tri = Triangle(10)
        assert tri.num_sides == 3
        assert tri.width == pytest.approx(10)
        assert tri.height == pytest.approx(10 * math.sqrt(3) / 2)

    def test_polygon_vertices_sit_in_footprint(self) -> None:
        for n in (3, 5, 6, 8, 11):
            p = Polygon(n, 3.0)
            verts = p.vertices
            assert verts.shape == (n, 2)
            assert verts.min(axis=0).tolist() == pytest.approx([0.0, 0.0])
            assert verts.max(axis=0).tolist() == pytest.approx([p.width, p.height])
            # every side has the requested length
            sides = np.linalg.norm(np.roll(verts, -1, axis=0) - verts, axis=1)
            assert sides.tolist() == pytest.approx([3.0] * n)

    def test_polygon_bottom_edge_is_horizontal(self) -> None:
        verts = Polygon(5, 2.0).vertices
        assert verts[0][1] == pytest.approx(0.0)
        assert verts[1][1] == pytest.approx(0.0)

    def test_rectangle_spacer_diamond(self) -> None:
        r = Rectangle(4, 2)
        assert (r.width, r.height) == (4.0, 2.0)
        s = Spacer(3, 7)
        assert (s.width, s.height) == (3.0, 7.0)
        d = Diamond(2)
        assert d.width == pytest.approx(2 * math.sqrt(2))
        assert d.height == pytest.approx(2 * math.sqrt(2))

    def test_position_defaults_to_origin(self) -> None:
        sq = Square(1)
        assert (sq.xpos, sq.ypos) == (0.0, 0.0)
        sq.set_position(3, 4)
        assert (sq.xpos, sq.ypos) == (3.0, 4.0)

    @pytest.mark.parametrize(
        "factory",
        [
            lambda: Circle(0),
            lambda: Circle(-1),
            lambda: Circle(float("nan")),
            lambda: Square(0),
            lambda: Triangle(-2),
            lambda: Polygon(2, 1.0),
            lambda: Polygon(4.5, 1.0),
            lambda: Rectangle(0, 1),
            lambda: Rectangle(1, -1),
            lambda: Spacer(1, 0),
            lambda: Diamond(0),
            lambda: Line(0, 0),
            lambda: Line(-1, 2),
            lambda: Circle("big"),
        ],
    )
    def test_invalid_geometry(self, factory) -> None:
        with pytest.raises(InvalidGeometry):
            factory()

    def test_errors_share_a_base(self) -> None:
        with pytest.raises(ShapeError):
            Circle(0)
        with pytest.raises(ValueError):
            Circle(0)


class TestRotated:
    def test_half_keeps_footprint(self) -> None:
        r = Rotated(Rectangle(4, 2), RotationAngle.HALF)
        assert (r.width, r.height) == (4.0, 2.0)

    @pytest.mark.parametrize("angle", [90, 270, RotationAngle.QUARTER, RotationAngle.THREE_QUARTER])
    def test_quarter_turns_swap_footprint(self, angle) -> None:
        r = Rotated(Rectangle(4, 2), angle)
        assert (r.width, r.height) == (2.0, 4.0)

    def test_anchor_keeps_child_in_frame(self) -> None:
        rect = Rectangle(4, 2)
        assert Rotated(rect, 90).anchor() == (2.0, 0.0)
        assert Rotated(rect, 180).anchor() == (4.0, 2.0)
        assert Rotated(rect, 270).anchor() == (0.0, 4.0)

    def test_footprint_follows_reassigned_child(self) -> None:
        v = Vertical(Rectangle(1, 1))
        r = Rotated(v, RotationAngle.QUARTER)
        v.shapes = [Rectangle(1, 1)] * 3
        assert (r.width, r.height) == (3.0, 1.0)
        assert r.anchor() == (3.0, 0.0)
        assert outline_bounds(r) == pytest.approx((0.0, 0.0, 3.0, 1.0))

    @pytest.mark.parametrize("angle", [0, 45, 360, -90, 90.5, True, None, "90"])
    def test_invalid_angle(self, angle) -> None:
        with pytest.raises(InvalidAngle):
            Rotated(Square(1), angle)

    def test_rotated_helper(self) -> None:
        r = Square(1).rotated(RotationAngle.QUARTER)
        assert isinstance(r, Rotated)
        assert r.angle == 90


class TestScaled:
    def test_footprint_is_scaled(self) -> None:
        s = Scaled(Rectangle(4, 2), 0.5, 3)
        assert s.width == pytest.approx(2)
        assert s.height == pytest.approx(6)

    def test_uniform_helper(self) -> None:
        s = Circle(1).scaled(2)
        assert (s.fx, s.fy) == (2.0, 2.0)
        assert s.width == pytest.approx(4)

    def test_footprint_follows_reassigned_child(self) -> None:
        v = Vertical(Rectangle(1, 1))
        s = Scaled(v, 2, 2)
        v.shapes = [Rectangle(1, 1)] * 3
        assert s.height == pytest.approx(v.height * 2)
        assert s.width == pytest.approx(2)
        assert Horizontal(s, Square(1)).translate(1) == "2 0 translate"

    @pytest.mark.parametrize("fx, fy", [(0, 1), (1, 0), (-1, 1), (1, -0.5), (float("inf"), 1)])
    def test_invalid_factor(self, fx, fy) -> None:
        with pytest.raises(InvalidScaleFactor):
            Scaled(Square(1), fx, fy)


class TestCombinators:
    def test_vertical_footprint(self) -> None:
        v = Vertical(Square(10), Circle(2.5))
        assert v.width == pytest.approx(10)
        assert v.height == pytest.approx(15)

    def test_circle_size_is_a_radius(self) -> None:
        v = Vertical(Square(10), Circle(5))
        assert v.height == pytest.approx(20)

    def test_horizontal_footprint(self) -> None:
        h = Horizontal(Rectangle(3, 1), Rectangle(2, 5))
        assert h.width == pytest.approx(5)
        assert h.height == pytest.approx(5)

    def test_layered_footprint_is_elementwise_max(self) -> None:
        lay = Layered(Rectangle(3, 1), Rectangle(2, 5))
        assert (lay.width, lay.height) == (3.0, 5.0)

    def test_translate_points(self) -> None:
        shapes = [Rectangle(1, 2), Rectangle(3, 4), Rectangle(5, 6)]
        assert Vertical(*shapes).generate_translate_points() == [0.0, 2.0, 6.0]
        assert Horizontal(*shapes).generate_translate_points() == [0.0, 1.0, 4.0]
        assert Layered(*shapes).generate_translate_points() == [0.0, 0.0, 0.0]

    def test_offsets_follow_axis(self) -> None:
        shapes = [Rectangle(1, 2), Rectangle(3, 4)]
        assert Vertical(*shapes).offsets() == [(0.0, 0.0), (0.0, 2.0)]
        assert Horizontal(*shapes).offsets() == [(0.0, 0.0), (1.0, 0.0)]

    def test_translate_instruction(self) -> None:
        v = Vertical(Square(10), Circle(2.5))
        assert v.translate(0) == "0 0 translate"
        assert v.translate(1) == "0 10 translate"
        h = Horizontal(Rectangle(1.5, 1), Circle(1))
        assert h.translate(1) == "1.5 0 translate"
        assert Layered(Square(1), Circle(1)).translate(1) == ""

    def test_translate_out_of_range(self) -> None:
        with pytest.raises(IndexError):
            Vertical(Square(1)).translate(3)
        with pytest.raises(IndexError):
            Layered(Square(1)).translate(1)

    def test_offsets_recomputed_after_reassignment(self) -> None:
        v = Vertical(Rectangle(1, 2), Rectangle(1, 3))
        assert v.generate_translate_points() == [0.0, 2.0]
        v.shapes = [Rectangle(1, 7), Rectangle(1, 1), Rectangle(1, 1)]
        assert v.generate_translate_points() == [0.0, 7.0, 8.0]
        assert v.height == pytest.approx(9)

    @pytest.mark.parametrize("kind", [Layered, Vertical, Horizontal])
    def test_empty_composition(self, kind) -> None:
        with pytest.raises(EmptyComposition):
            kind()

    @pytest.mark.parametrize("kind", [CompoundLayered, CompoundVertical, CompoundHorizontal])
    def test_empty_compound_composition(self, kind) -> None:
        with pytest.raises(EmptyComposition):
            kind([])

    def test_reassigning_empty_children_fails(self) -> None:
        v = Vertical(Square(1))
        with pytest.raises(EmptyComposition):
            v.shapes = []
        assert len(v.shapes) == 1

    def test_compound_variants_share_layout(self) -> None:
        shapes = [Rectangle(1, 2), Rectangle(3, 4)]
        cv = CompoundVertical(shapes)
        assert isinstance(cv, Vertical)
        assert cv.generate_translate_points() == Vertical(*shapes).generate_translate_points()
        ch = CompoundHorizontal(shapes)
        assert (ch.width, ch.height) == (4.0, 4.0)
        cl = CompoundLayered(shapes)
        assert (cl.width, cl.height) == (3.0, 4.0)

    def test_compound_cannot_be_built_directly(self) -> None:
        with pytest.raises(TypeError):
            Compound([Square(1)])

    def test_footprints_cover_shared_nodes(self) -> None:
        rect = Rectangle(2, 1)
        h = Horizontal(rect, rect)
        sizes = footprints(Vertical(h, Rotated(h, 90)))
        assert sizes[id(h)] == (4.0, 1.0)
        assert sizes[id(rect)] == (2.0, 1.0)
        assert len(sizes) == 4

    def test_non_shape_child_rejected(self) -> None:
        with pytest.raises(TypeError):
            Vertical(Square(1), "square")

    def test_cycles_rejected(self) -> None:
        v = Vertical(Square(1))
        with pytest.raises(CyclicComposition):
            v.shapes = [v]
        h = Horizontal(Rotated(v, 90))
        with pytest.raises(CyclicComposition):
            v.shapes = [Square(1), h]

    def test_shared_child(self) -> None:
        sq = Square(2)
        h = Horizontal(sq, sq)
        v = Vertical(sq, h)
        assert h.width == pytest.approx(4)
        assert v.height == pytest.approx(4)
        assert (sq.xpos, sq.ypos) == (0.0, 0.0)

    def test_composition_helpers_flatten(self) -> None:
        a, b, c = Square(1), Circle(1), Rectangle(1, 1)
        h = a.beside(b).beside(c)
        assert isinstance(h, Horizontal)
        assert h.shapes == [a, b, c]
        v = a.stacked(b)
        assert v.shapes == [a, b]
        lay = a.layered(b).layered(c)
        assert lay.shapes == [a, b, c]


class TestWalk:
    def test_preorder(self) -> None:
        a, b = Square(1), Circle(1)
        r = Rotated(b, 90)
        v = Vertical(a, r)
        assert list(walk(v)) == [v, a, r, b]

    def test_primitive_has_no_children(self) -> None:
        sq = Square(1)
        assert list(walk(sq)) == [sq]
