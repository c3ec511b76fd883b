from ..config.config_manager import BAConfig
from ..utils.population import Population
from .base import OptimizerStrategy, StepResult


class BAStrategy(OptimizerStrategy):
    """
    Bat Algorithm.

    Each bat, every iteration:

    1. draws a frequency f ~ U[frequency_min, frequency_max];
    2. v <- v + f * (x - gbest); x' <- clamp(x + v);
    3. with probability (1 - pulse_rate) takes a local random walk
       x' <- clamp(x' + loudness * (U(0, 1) - 0.5)) per dimension;
    4. accepts x' only if it improves the bat's fitness AND a U(0, 1) draw
       is below its loudness. A rejected bat keeps its previous position,
       velocity, frequency and fitness.

    After the move decision, every bat's pulse rate moves geometrically
    towards 1 and its loudness towards 0:

        pulse_rate <- 1 - (1 - pulse_rate) * pulse_rate_increase
        loudness   <- loudness * loudness_decay

    The global best used in step 2 is the one at the start of the sweep.
    """

    name = "BA"
    config_class = BAConfig

    def initial_aux(self, population, params):
        return {"iteration": 0, **self.global_best_aux(population)}

    def _step(self, population, aux, params: BAConfig, rng):
        global_best = aux["global_best_position"]
        new_candidates = []

        for bat in population:
            dims = bat.dimensions
            frequency = float(rng.uniform(params.frequency_min, params.frequency_max))
            velocity = bat.velocity + frequency * (bat.position - global_best)
            position = self.clamp(bat.position + velocity)

            if rng.random() > bat.pulse_rate:
                position = self.clamp(position + bat.loudness * (rng.random(dims) - 0.5))

            fitness = self.evaluate(position)

            if fitness < bat.fitness and rng.random() < bat.loudness:
                updated = bat.replace(position=position, fitness=fitness,
                                      velocity=velocity, frequency=frequency)
            else:
                updated = bat

            updated = updated.replace(
                pulse_rate=1.0 - (1.0 - bat.pulse_rate) * params.pulse_rate_increase,
                loudness=bat.loudness * params.loudness_decay,
            )
            new_candidates.append(updated)

        new_population = Population(new_candidates)
        for bat in new_population:
            self.update_global_best(aux, bat)

        aux["iteration"] += 1
        return StepResult(new_population, aux)
