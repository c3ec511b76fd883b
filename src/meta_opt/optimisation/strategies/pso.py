from ..config.config_manager import PSOConfig
from ..utils.population import Population
from .base import OptimizerStrategy, StepResult


class PSOStrategy(OptimizerStrategy):
    """
    Canonical global-best Particle Swarm Optimization.

    For each particle, per dimension with fresh r1, r2 ~ U(0, 1):

        v <- w*v + c1*r1*(pbest - x) + c2*r2*(gbest - x)
        x <- clamp(x + v)

    The personal best moves when the new fitness improves on it, and the
    swarm's global best (kept in aux) moves when that personal best improves
    on it. Particles later in the sweep already see a global best improved
    by earlier ones.
    """

    name = "PSO"
    config_class = PSOConfig

    def initial_aux(self, population, params):
        return {"iteration": 0, **self.global_best_aux(population)}

    def _step(self, population, aux, params: PSOConfig, rng):
        new_candidates = []

        for particle in population:
            dims = particle.dimensions
            r1 = rng.random(dims)
            r2 = rng.random(dims)

            velocity = (
                params.w * particle.velocity
                + params.c1 * r1 * (particle.personal_best_position - particle.position)
                + params.c2 * r2 * (aux["global_best_position"] - particle.position)
            )
            position = self.clamp(particle.position + velocity)
            fitness = self.evaluate(position)

            moved = particle.replace(position=position, fitness=fitness, velocity=velocity)
            if fitness < particle.personal_best_fitness:
                moved = moved.replace(personal_best_position=position, personal_best_fitness=fitness)
                self.update_global_best(aux, moved)

            new_candidates.append(moved)

        aux["iteration"] += 1
        return StepResult(Population(new_candidates), aux)
