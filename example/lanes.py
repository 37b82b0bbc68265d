"""Index the cars of two road lanes by rank order, one map per lane.

Each car gets a rank spaced 10 apart so a lane changing car can be given a
rank between two others without renumbering the rest.
"""
import argparse
import logging
import random
import sys
from dataclasses import dataclass

from bpmap import BpTreeMap

logger = logging.getLogger("example")


@dataclass
class Car:
    vin: int
    dist: float


def fill_lane(lane: BpTreeMap, rng: random.Random, first_vin: int, cars: int):
    dist = 0.0
    for i in range(cars):
        dist += rng.randrange(5)
        lane.put(10 * (i + 1), Car(first_vin + i, dist))


def car_behind(lane: BpTreeMap, dist: float):
    """Return the closest car in ``lane`` that is at least ``dist`` from the end."""
    for rank, car in lane.iterate():
        if car.dist >= dist:
            return rank, car
    return None


def main(cars: int, seed: int):
    rng = random.Random(seed)
    lane1, lane2 = BpTreeMap(), BpTreeMap()
    fill_lane(lane1, rng, 1, cars)
    fill_lane(lane2, rng, cars + 1, cars)

    rank = 10 * (cars // 2)
    car, _ = lane1.get(rank)
    behind = car_behind(lane2, car.dist)
    logger.info("car %s at rank %d in lane 1", car, rank)
    if behind is None:
        logger.info("no car behind it in lane 2, free to change lanes")
    else:
        logger.info("closest car behind it in lane 2: %s at rank %d", behind[1], behind[0])


if __name__ == "__main__":
    logging.basicConfig(
        stream=sys.stdout,
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser("example lanes")
    parser.add_argument("--cars", type=int, default=60)
    parser.add_argument("--seed", type=int, default=1)

    args = parser.parse_args()

    main(args.cars, args.seed)
