"""
Passenger ordering optimization.

A genetic search over permutations of the assigned passengers looks for
an ordering that boards lower-health-risk people first. Individuals are
permutations of [0..n); mutation swaps two positions; crossover takes a
prefix of one parent and fills the rest in the other parent's order.

Fitness of a permutation p:

    fitness(p) = 1 / (1 + sum_i (rank[p[i]] - i)^2)

where rank[j] is passenger j's position in the ascending health-risk
order. The ideal ordering has fitness 1.

The ordering reported for boarding is the deterministic stable sort by
ascending health risk; the search's best permutation, fitness and
generation count are reported alongside it as statistics.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING
import logging
import time

import numpy as np

from mission_risk.config import Settings, get_settings
from mission_risk.core.mission_aggregator import assigned_people
from mission_risk.core.route import COMMUNICATION_DELAY_DISTANCE, Route

if TYPE_CHECKING:
    from mission_risk.core.entities import Mission, Person


logger = logging.getLogger(__name__)

UNASSESSED_HEALTH_RISK = 0.5
ELITE_COUNT = 2
TOURNAMENT_SIZE = 3

LONG_DURATION_DAYS = 30.0
HIGH_FUEL_KG = 50000.0

OPTIMIZATION_ERROR = "Error in optimization"


@dataclass
class OptimizationResult:
    """Outcome of a passenger ordering optimization.

    Attributes:
        optimized: False when there was nothing to optimize or the search failed
        reason: Explanation when not optimized
        optimal_order: Best permutation found by the search (indices into
            the assigned passengers)
        passenger_order: Boarding order actually used, [{'id', 'name'}]
        route: Waypoint assignment built from passenger_order
        fitness: Fitness of optimal_order
        average_risk: Mean health risk of the assigned passengers
        generations: Generations run by the search
        recommendations: Route-based recommendations
    """
    optimized: bool
    reason: Optional[str] = None
    optimal_order: List[int] = field(default_factory=list)
    passenger_order: List[Dict[str, str]] = field(default_factory=list)
    route: Dict[str, Any] = field(default_factory=dict)
    fitness: float = 0.0
    average_risk: float = 0.0
    generations: int = 0
    recommendations: List[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "optimized": self.optimized,
            "reason": self.reason,
            "optimal_order": list(self.optimal_order),
            "passenger_order": [dict(p) for p in self.passenger_order],
            "route": self.route,
            "fitness": self.fitness,
            "average_risk": self.average_risk,
            "generations": self.generations,
            "recommendations": list(self.recommendations),
            "timestamp": self.timestamp,
        }


def health_risk_of(person: "Person") -> float:
    risk = person.health_risk
    return UNASSESSED_HEALTH_RISK if risk is None else float(risk)


def ascending_health_order(people: Sequence["Person"]) -> List[int]:
    """Indices of people sorted by ascending health risk, ties by position."""
    return sorted(range(len(people)), key=lambda i: health_risk_of(people[i]))


class GeneticOrderSearch:
    """
    Elitist genetic search over permutations.

    Args:
        ranks: rank[j] is the target position of item j
        population_size: Individuals per generation
        generations: Maximum generations
        mutation_rate: Probability a child is mutated
        crossover_rate: Probability a child is bred by crossover
        time_budget: Wall-clock limit in seconds, or None
        rng: numpy random Generator
    """

    def __init__(
        self,
        ranks: Sequence[int],
        population_size: int = 50,
        generations: int = 100,
        mutation_rate: float = 0.3,
        crossover_rate: float = 0.9,
        time_budget: Optional[float] = None,
        rng: Optional[np.random.Generator] = None
    ):
        if population_size < 2:
            raise ValueError(f"population_size must be >= 2, got {population_size}")
        if generations < 0:
            raise ValueError(f"generations must be non-negative, got {generations}")

        self.ranks = np.asarray(ranks, dtype=int)
        self.size = len(self.ranks)
        self.population_size = population_size
        self.generations = generations
        self.mutation_rate = mutation_rate
        self.crossover_rate = crossover_rate
        self.time_budget = time_budget
        self.rng = rng if rng is not None else np.random.default_rng()

    def fitness(self, permutation: np.ndarray) -> float:
        displacement = self.ranks[permutation] - np.arange(self.size)
        return 1.0 / (1.0 + float(np.sum(displacement ** 2)))

    def mutate(self, permutation: np.ndarray) -> np.ndarray:
        child = permutation.copy()
        i, j = self.rng.integers(0, self.size, size=2)
        child[i], child[j] = child[j], child[i]
        return child

    def crossover(self, mother: np.ndarray, father: np.ndarray) -> np.ndarray:
        cut = int(self.rng.integers(0, self.size + 1))
        prefix = mother[:cut]
        taken = set(prefix.tolist())
        suffix = [gene for gene in father.tolist() if gene not in taken]
        return np.concatenate([prefix, np.asarray(suffix, dtype=int)])

    def _select(self, population: List[np.ndarray], scores: np.ndarray) -> np.ndarray:
        contenders = self.rng.integers(0, len(population), size=TOURNAMENT_SIZE)
        winner = contenders[np.argmax(scores[contenders])]
        return population[winner]

    def run(self) -> Tuple[List[int], float, int]:
        """
        Run the search.

        Returns:
            (best permutation, best fitness, generations run)
        """
        deadline = None
        if self.time_budget is not None:
            deadline = time.monotonic() + self.time_budget

        population = [self.rng.permutation(self.size) for _ in range(self.population_size)]
        scores = np.array([self.fitness(p) for p in population])

        generation = 0
        while generation < self.generations and scores.max() < 1.0:
            if deadline is not None and time.monotonic() >= deadline:
                logger.debug(f"Search deadline reached after {generation} generations")
                break

            elite = np.argsort(scores)[::-1][:ELITE_COUNT]
            next_population = [population[i] for i in elite]

            while len(next_population) < self.population_size:
                mother = self._select(population, scores)
                if self.rng.random() < self.crossover_rate:
                    child = self.crossover(mother, self._select(population, scores))
                else:
                    child = mother.copy()
                if self.rng.random() < self.mutation_rate:
                    child = self.mutate(child)
                next_population.append(child)

            population = next_population
            scores = np.array([self.fitness(p) for p in population])
            generation += 1

        best = int(np.argmax(scores))
        return population[best].tolist(), float(scores[best]), generation


def waypoint_time(waypoint_type: str, duration_days: float) -> float:
    """Estimated days from departure to a waypoint."""
    if waypoint_type == "checkpoint":
        return duration_days * 0.5
    if waypoint_type == "arrival":
        return duration_days
    return 0.0


def build_route_plan(route: Optional[Route], ordered: Sequence["Person"]) -> Dict[str, Any]:
    """Assign every passenger to the launch waypoint and time each waypoint."""
    passenger_order = [{"id": p.id, "name": p.name} for p in ordered]
    if route is None:
        return {
            "waypoints": [],
            "total_distance": 0.0,
            "estimated_duration_days": 0.0,
            "fuel_required": 0,
            "passenger_order": passenger_order,
        }

    waypoints = []
    for waypoint in route.waypoints:
        entry = waypoint.to_dict()
        entry["passengers"] = [p.id for p in ordered] if waypoint.type == "launch" else []
        entry["estimated_time"] = waypoint_time(waypoint.type, route.travel_time_days)
        waypoints.append(entry)

    return {
        "waypoints": waypoints,
        "total_distance": route.distance,
        "estimated_duration_days": route.travel_time_days,
        "fuel_required": route.fuel_required,
        "passenger_order": passenger_order,
    }


def route_recommendations(route: Optional[Route]) -> List[str]:
    if route is None:
        return []

    recommendations = []
    if route.distance > COMMUNICATION_DELAY_DISTANCE:
        recommendations.append("Long-distance mission: Implement communication protocols")
    if route.travel_time_days > LONG_DURATION_DAYS:
        recommendations.append("Long-duration mission: Psychological support recommended")
    if route.fuel_required > HIGH_FUEL_KG:
        recommendations.append("High fuel requirement: Verify fuel capacity")
    return recommendations


def optimize_route(
    mission: "Mission",
    people: Sequence["Person"],
    settings: Optional[Settings] = None,
    rng: Optional[np.random.Generator] = None
) -> OptimizationResult:
    """
    Optimize the boarding order of a mission's passengers.

    Args:
        mission: Mission to optimize
        people: Person snapshot; filtered to the mission's passenger ids
        settings: Search parameters; application settings when omitted
        rng: Random generator for the search

    Returns:
        OptimizationResult; `optimized=False` with zeroed statistics when
        no passengers are assigned or the search fails
    """
    passengers = assigned_people(mission, people)
    if not passengers:
        return OptimizationResult(optimized=False, reason="No passengers to optimize")

    settings = settings or get_settings()

    try:
        order = ascending_health_order(passengers)
        ranks = [0] * len(passengers)
        for position, index in enumerate(order):
            ranks[index] = position

        search = GeneticOrderSearch(
            ranks,
            population_size=settings.optimizer_population,
            generations=settings.optimizer_generations,
            mutation_rate=settings.optimizer_mutation_rate,
            crossover_rate=settings.optimizer_crossover_rate,
            time_budget=settings.optimizer_time_budget_seconds,
            rng=rng,
        )
        best, fitness, generations = search.run()

        ordered = [passengers[i] for i in order]
        plan = build_route_plan(mission.route, ordered)
    except Exception as e:
        logger.error(f"Error optimizing mission {mission.id}: {e}")
        return OptimizationResult(optimized=False, reason=OPTIMIZATION_ERROR)

    logger.info(
        f"Optimized mission {mission.id}: {len(passengers)} passengers, "
        f"fitness={fitness:.4f} after {generations} generations"
    )

    return OptimizationResult(
        optimized=True,
        optimal_order=best,
        passenger_order=plan["passenger_order"],
        route=plan,
        fitness=fitness,
        average_risk=float(np.mean([health_risk_of(p) for p in passengers])),
        generations=generations,
        recommendations=route_recommendations(mission.route),
    )
