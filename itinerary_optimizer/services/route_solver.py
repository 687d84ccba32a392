"""
Solver del orden de visita de un dia.

- N <= 1: identidad.
- 2 <= N <= 6: busqueda exhaustiva sobre las N! permutaciones (720 como
  maximo). No subir el limite sin cambiar de algoritmo.
- N > 6: heuristica greedy de vecino mas cercano, sin garantia de optimo.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from itinerary_optimizer.config import OptimizerSettings
from itinerary_optimizer.services.route_scorer import RouteScorer
from itinerary_optimizer.type_defs import Order, SolveHook

logger = logging.getLogger(__name__)

ALGORITHM_IDENTITY = "identity"
ALGORITHM_EXACT = "exact"
ALGORITHM_NEAREST_NEIGHBOR = "nearest_neighbor"


@dataclass
class SolverResult:
    order: Order
    algorithm: str
    score: float
    evaluations: int = 0


def heap_permutations(n: int) -> Iterator[Tuple[int, ...]]:
    """
    Permutaciones de ``range(n)`` con el algoritmo de Heap (iterativo).

    La primera permutacion generada es la identidad.
    """
    items = list(range(n))
    yield tuple(items)
    counters = [0] * n
    i = 1
    while i < n:
        if counters[i] < i:
            if i % 2 == 0:
                items[0], items[i] = items[i], items[0]
            else:
                items[counters[i]], items[i] = items[i], items[counters[i]]
            yield tuple(items)
            counters[i] += 1
            i = 1
        else:
            counters[i] = 0
            i += 1


class RouteSolver:
    """Elige el algoritmo segun el numero de actividades del dia."""

    def __init__(self, settings: Optional[OptimizerSettings] = None, on_solve: SolveHook = None):
        self.settings = settings or OptimizerSettings()
        self.on_solve = on_solve

    def solve(self, scorer: RouteScorer) -> SolverResult:
        n = scorer.size
        if n <= 1:
            order = list(range(n))
            result = SolverResult(order=order, algorithm=ALGORITHM_IDENTITY, score=scorer.score(order))
        elif n <= self.settings.exact_limit:
            result = self.solve_exact(scorer)
        else:
            result = self.solve_nearest_neighbor(scorer)

        logger.debug(
            f"[Solver] {result.algorithm} n={n} score={result.score:.1f} "
            f"evaluations={result.evaluations} order={result.order}"
        )
        if self.on_solve is not None:
            self.on_solve(result)
        return result

    def solve_exact(self, scorer: RouteScorer) -> SolverResult:
        """
        Minimo score sobre todas las permutaciones.

        Empates: primero el orden que adelanta las prioridades altas, despues
        el mas cercano al orden de entrada.
        """
        best_key = None
        best_order: Optional[Tuple[int, ...]] = None
        best_score = 0.0
        evaluations = 0

        for order in heap_permutations(scorer.size):
            score = scorer.score(order)
            evaluations += 1
            key = (score, tuple(-scorer.priorities[i] for i in order), order)
            if best_key is None or key < best_key:
                best_key = key
                best_order = order
                best_score = score

        return SolverResult(
            order=list(best_order),
            algorithm=ALGORITHM_EXACT,
            score=best_score,
            evaluations=evaluations,
        )

    def solve_nearest_neighbor(self, scorer: RouteScorer) -> SolverResult:
        """
        Construccion greedy desde la actividad de mayor prioridad.

        Cada paso elige el no visitado que minimiza
        ``travel(actual -> candidato) - prioridad(candidato) * 300``. Usa la
        direccion actual -> candidato de la matriz (puede ser asimetrica).
        """
        n = scorer.size
        priorities = scorer.priorities
        bonus = self.settings.priority_bonus_seconds

        current = max(range(n), key=lambda i: (priorities[i], -i))
        order: List[int] = [current]
        visited = [False] * n
        visited[current] = True
        evaluations = 0

        for _ in range(1, n):
            nearest = -1
            nearest_score = 0.0
            for candidate in range(n):
                if visited[candidate]:
                    continue
                move = scorer.matrix.duration(current, candidate) - priorities[candidate] * bonus
                evaluations += 1
                if nearest == -1 or move < nearest_score:
                    nearest = candidate
                    nearest_score = move
            order.append(nearest)
            visited[nearest] = True
            current = nearest

        return SolverResult(
            order=order,
            algorithm=ALGORITHM_NEAREST_NEIGHBOR,
            score=scorer.score(order),
            evaluations=evaluations,
        )
