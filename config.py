"""
Central settings for the solver and the puzzle generator.

Constructor arguments override these values; nothing here is read from the
environment.
"""

# Score added each time a technique confirms a cell
TECHNIQUE_WEIGHTS = {
    'elimination': 1,
    'hidden-single': 2,
    'naked-pair': 3,
    'naked-triple': 4,
    'brute-force': 5,      # added once per search invocation (a guess)
}

# Difficulty levels: number of cells removed and the accepted score band
LEVEL_CONFIG = {
    1: {
        'name': 'Easy',
        'empty_cells': (40, 45),
        'score_band': (41, 50),     # average around 45
    },
    2: {
        'name': 'Medium',
        'empty_cells': (46, 49),
        'score_band': (51, 60),     # average around 55
    },
    3: {
        'name': 'Hard',
        'empty_cells': (50, 53),
        'score_band': (61, 70),     # average around 65
    },
    4: {
        'name': 'Expert',
        'empty_cells': (54, 58),
        'score_band': (111, 120),   # average around 115, needs guessing
    },
}

# Highest level whose puzzles must be solvable by deduction alone
LOGIC_ONLY_MAX_LEVEL = 3

GENERATOR_CONFIG = {
    'max_attempts': 20000,    # None retries forever
}
