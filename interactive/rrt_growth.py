import logging
import math
import random
from typing import Dict, List, Optional, Tuple

import pygame

from planar_kdtree import KdTree, KdTreeNode, set_debug

logger = logging.getLogger("rrt_growth")

# ---------------------------- Obstacles ---------------------------- #


class Disc:
    __slots__ = ("r", "x", "y")

    def __init__(self, x: float, y: float, r: float):
        self.x = float(x)
        self.y = float(y)
        self.r = float(r)

    def contains(self, x: float, y: float) -> bool:
        dx = x - self.x
        dy = y - self.y
        return dx * dx + dy * dy <= self.r * self.r

    def draw(self, screen):
        pygame.draw.circle(screen, (90, 90, 90), (int(self.x), int(self.y)), int(self.r))


def segment_blocked(
    a: Tuple[float, float], b: Tuple[float, float], discs: List[Disc], samples: int = 10
) -> bool:
    """Sample along a-b and report whether any sample lands inside a disc."""
    for i in range(1, samples + 1):
        s = i / samples
        x = a[0] + (b[0] - a[0]) * s
        y = a[1] + (b[1] - a[1]) * s
        if any(d.contains(x, y) for d in discs):
            return True
    return False


# ------------------------------ RRT* ------------------------------ #


class RRTStar:
    """
    Grows an RRT* tree from a start pose, using the k-d tree for the nearest
    node lookup and the neighbourhood query that drives parent choice and
    rewiring.

    The planning tree is kept in `parent`/`cost` maps keyed by node id; the
    k-d tree's own parent links are unrelated.
    """

    def __init__(
        self,
        start: Tuple[float, float],
        width: int,
        height: int,
        step_size: float = 20.0,
        neighbor_radius: float = 45.0,
        goal_bias: float = 0.05,
    ):
        self.width = width
        self.height = height
        self.step_size = step_size
        self.neighbor_radius = neighbor_radius
        self.goal_bias = goal_bias
        self.index = KdTree(start)
        self.parent: Dict[int, Optional[int]] = {0: None}
        self.cost: Dict[int, float] = {0: 0.0}
        self.discs: List[Disc] = []
        self.goal: Optional[Tuple[float, float]] = None
        self.goal_node: Optional[KdTreeNode] = None
        self.batch = 0

    def set_goal(self, x: float, y: float):
        self.goal = (float(x), float(y))
        self.goal_node = None
        self.batch += 1
        logger.info("goal moved to %s, batch %d", self.goal, self.batch)

    def sample(self) -> Tuple[float, float]:
        if self.goal is not None and random.random() < self.goal_bias:
            return self.goal
        return (random.uniform(0, self.width), random.uniform(0, self.height))

    def steer(self, src: KdTreeNode, dst: Tuple[float, float]) -> Tuple[float, float]:
        dx = dst[0] - src.x
        dy = dst[1] - src.y
        dist = math.hypot(dx, dy)
        if dist <= self.step_size:
            return dst
        s = self.step_size / dist
        return (src.x + dx * s, src.y + dy * s)

    def step(self) -> Optional[KdTreeNode]:
        target = self.sample()
        nearest = self.index.nearest(target)
        new_xy = self.steer(nearest, target)
        if new_xy == (nearest.x, nearest.y):
            return None
        if segment_blocked((nearest.x, nearest.y), new_xy, self.discs):
            return None

        # Choose the cheapest collision-free parent among the neighbours
        near = self.index.range_query(new_xy, self.neighbor_radius)
        best_parent = nearest
        best_cost = self.cost[nearest.id_] + math.sqrt(nearest.distance2(new_xy))
        for cand in near:
            c = self.cost[cand.id_] + math.sqrt(cand.distance2(new_xy))
            if c < best_cost and not segment_blocked(
                (cand.x, cand.y), new_xy, self.discs
            ):
                best_parent, best_cost = cand, c

        # tag_a records which goal batch grew the node
        node = self.index.insert(new_xy, tag_a=self.batch)
        self.parent[node.id_] = best_parent.id_
        self.cost[node.id_] = best_cost

        # Rewire
        for cand in near:
            if cand.id_ == best_parent.id_:
                continue
            c = best_cost + math.sqrt(cand.distance2(new_xy))
            if c < self.cost[cand.id_] and not segment_blocked(
                new_xy, (cand.x, cand.y), self.discs
            ):
                self.parent[cand.id_] = node.id_
                self.cost[cand.id_] = c

        if self.goal is not None and node.distance2(self.goal) < self.step_size**2:
            if self.goal_node is None or best_cost < self.cost[self.goal_node.id_]:
                self.goal_node = node
                logger.info("goal reached at cost %.1f", best_cost)
        return node

    def path(self) -> List[KdTreeNode]:
        out: List[KdTreeNode] = []
        id_ = None if self.goal_node is None else self.goal_node.id_
        while id_ is not None:
            out.append(self.index.get(id_))
            id_ = self.parent[id_]
        return out

    def draw(self, screen):
        for d in self.discs:
            d.draw(screen)
        for node in self.index:
            pid = self.parent[node.id_]
            if pid is None:
                continue
            p = self.index.get(pid)
            pygame.draw.line(screen, (160, 190, 230), (p.x, p.y), (node.x, node.y))
        path = self.path()
        if len(path) > 1:
            pygame.draw.lines(screen, (220, 40, 40), False, [(n.x, n.y) for n in path], 3)
        if self.goal is not None:
            pygame.draw.circle(screen, (40, 160, 40), (int(self.goal[0]), int(self.goal[1])), 6)


# ------------------------------- main ------------------------------- #


def main():
    logging.basicConfig(level=logging.INFO, format="[%(name)s] %(levelname)s: %(message)s")
    set_debug(False)

    pygame.init()
    width, height = 800, 600
    screen = pygame.display.set_mode((width, height))
    clock = pygame.time.Clock()
    planner = RRTStar((40.0, height / 2), width, height)

    running = True
    while running:
        clock.tick(60)
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.MOUSEBUTTONDOWN:
                x, y = event.pos
                if event.button == 1:
                    planner.set_goal(x, y)
                else:
                    planner.discs.append(Disc(x, y, random.randint(20, 50)))

        for _ in range(20):
            planner.step()

        screen.fill((255, 255, 255))
        planner.draw(screen)
        pygame.display.flip()

    pygame.quit()


if __name__ == "__main__":
    main()
