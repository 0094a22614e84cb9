"""Profile tick_world() to identify performance bottlenecks."""

import cProfile
import pstats
import random
import time
from io import StringIO

from dlasim.config import ClusterPattern, ParticleKindSetting, SimulationSettings
from dlasim.engine.simulation import create_world, tick_world
from dlasim.model.world import World


def create_test_world(
    max_walkers: int = 2000,
    walker_kind: ParticleKindSetting = ParticleKindSetting.CIRCLE,
    seed: int = 0,
) -> World:
    """Create a default-sized world with a replenished walker population."""
    settings = SimulationSettings(
        max_walkers=max_walkers,
        walker_kind=walker_kind,
        replenish_walkers=True,
        default_cluster=ClusterPattern.WALL,
        bias_towards="Meridian",
    )
    return create_world(settings, rng=random.Random(seed))


def measure_tick_rate(world: World, num_ticks: int) -> tuple[float, int]:
    """Measure ticks per second and final cluster size."""
    start_time = time.perf_counter()

    for _ in range(num_ticks):
        tick_world(world)

    elapsed = time.perf_counter() - start_time
    ticks_per_sec = num_ticks / elapsed if elapsed > 0 else 0
    return ticks_per_sec, len(world.cluster())


def profile_tick_world(world: World, num_ticks: int) -> str:
    """Profile tick_world and return profiling results."""
    profiler = cProfile.Profile()

    profiler.enable()
    for _ in range(num_ticks):
        tick_world(world)
    profiler.disable()

    stats_stream = StringIO()
    stats = pstats.Stats(profiler, stream=stats_stream)
    stats.sort_stats("cumulative")
    stats.print_stats(30)

    return stats_stream.getvalue()


def check_counter_drift(world: World, num_ticks: int) -> int:
    """Largest gap seen between num_walkers and the true free population."""
    worst = 0
    for _ in range(num_ticks):
        tick_world(world)
        free = len(world.walkers())
        worst = max(worst, abs(world.num_walkers - free))
    return worst


def main():
    print("=" * 60)
    print("Performance Profiling: tick_world()")
    print("=" * 60)

    print("\nWarm-up run (50 ticks)...")
    measure_tick_rate(create_test_world(max_walkers=200), 50)

    for walkers in (200, 1000, 2000):
        for kind in ParticleKindSetting:
            world = create_test_world(max_walkers=walkers, walker_kind=kind)
            ticks_per_sec, cluster = measure_tick_rate(world, 200)
            print(
                f"{walkers:>5} {kind.value:<6} walkers: "
                f"{ticks_per_sec:7.1f} ticks/sec, cluster={cluster}"
            )

    print("\n--- Counter drift at p=1 (500 ticks) ---")
    drift = check_counter_drift(create_test_world(max_walkers=500), 500)
    print(f"Max drift: {drift}")

    print("\n--- Profiling Breakdown (200 ticks, 2000 walkers) ---")
    print(profile_tick_world(create_test_world(), 200))


if __name__ == "__main__":
    main()
