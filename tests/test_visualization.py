"""Visualizer tests against the SDL dummy video driver."""
import numpy as np
import pytest

pygame = pytest.importorskip("pygame")

from particle import ParticleSystem
from visualization import Visualizer


@pytest.fixture
def visualizer():
    vis = Visualizer(200.0, 100.0, particle_types=3)
    yield vis
    vis.close()


def test_window_matches_domain_and_scale():
    vis = Visualizer(200.0, 100.0, particle_types=3, scale=0.5)
    try:
        assert vis.screen.get_size() == (100, 50)
    finally:
        vis.close()


def test_draw_does_not_touch_particles(visualizer):
    particles = ParticleSystem({"particle_count": 30, "seed": 4}, 200.0, 100.0)
    before = particles.positions.copy()

    visualizer.draw(particles)

    assert np.array_equal(particles.positions, before)


def test_draw_paints_particle_color(visualizer):
    particles = ParticleSystem({"particle_count": 1, "seed": 4}, 200.0, 100.0)
    particles.place([[50.0, 40.0]])

    visualizer.draw(particles)

    black = pygame.Color(0, 0, 0)
    assert visualizer.screen.get_at((52, 42)) != black
    assert visualizer.screen.get_at((10, 10)) == black


def test_poll_events_keeps_running_without_input(visualizer):
    pygame.event.clear()
    assert visualizer.poll_events() is True


def test_quit_event_stops(visualizer):
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    assert visualizer.poll_events() is False


@pytest.mark.parametrize("key", [pygame.K_q, pygame.K_ESCAPE])
def test_quit_keys_stop(visualizer, key):
    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=key))
    assert visualizer.poll_events() is False


def test_other_keys_are_ignored(visualizer):
    pygame.event.clear()
    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a))
    assert visualizer.poll_events() is True


def test_colors_padded_from_default_palette(visualizer):
    colors = visualizer._initialize_colors(3, [[1, 2, 3]])
    assert len(colors) == 3
    assert colors[0] == pygame.Color(1, 2, 3)


def test_invalid_colors_fall_back(visualizer):
    colors = visualizer._initialize_colors(2, [["bad"]])
    assert len(colors) == 2


def test_invalid_scale_rejected():
    with pytest.raises(ValueError):
        Visualizer(200.0, 100.0, particle_types=3, scale=0.0)
