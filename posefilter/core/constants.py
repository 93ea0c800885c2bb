"""
Global constants for the pose filtering pipeline

Includes:
- VNect-style 3D skeleton definition (24 measured + 4 derived joints)
- Derivation rules for anatomically implied joints
- Default filter parameters
- CSV column layout for recorded sequences
"""

# ===== VNect Skeleton (28 joints) =====
# The first 24 joints come straight from the pose estimator, in the order the
# estimator emits them. The last four are derived from the others.
VNECT_JOINT_NAMES = [
    'right_shoulder',   # 0
    'right_elbow',      # 1
    'right_hand',       # 2
    'right_thumb',      # 3
    'right_middle',     # 4
    'left_shoulder',    # 5
    'left_elbow',       # 6
    'left_hand',        # 7
    'left_thumb',       # 8
    'left_middle',      # 9
    'left_ear',         # 10
    'left_eye',         # 11
    'right_ear',        # 12
    'right_eye',        # 13
    'nose',             # 14
    'right_thigh',      # 15
    'right_shin',       # 16
    'right_foot',       # 17
    'right_toe',        # 18
    'left_thigh',       # 19
    'left_shin',        # 20
    'left_foot',        # 21
    'left_toe',         # 22
    'abdomen_upper',    # 23
    'hip',              # 24 (derived)
    'head',             # 25 (derived)
    'neck',             # 26 (derived)
    'spine',            # 27 (derived)
]

NUM_VNECT_JOINTS = len(VNECT_JOINT_NAMES)
NUM_VNECT_MEASURED_JOINTS = 24

# Derived joint -> (rule kind, source joints)
# Order matters only for readability; the topology computes its own
# evaluation order from the dependencies.
VNECT_DERIVATIONS = {
    'hip': ('torso_midpoint', ('abdomen_upper', 'right_thigh', 'left_thigh')),
    'neck': ('midpoint', ('right_shoulder', 'left_shoulder')),
    'head': ('head_projection', ('right_ear', 'left_ear', 'nose', 'neck')),
    'spine': ('alias', ('abdomen_upper',)),
}

# Rule kind -> number of source joints
DERIVATION_ARITY = {
    'alias': 1,
    'midpoint': 2,
    'torso_midpoint': 3,
    'head_projection': 4,
}

# ===== Filter Defaults =====
DEFAULT_KALMAN_Q = 0.001
DEFAULT_KALMAN_R = 0.0015
DEFAULT_LOWPASS_ALPHA = 0.1
DEFAULT_LOWPASS_DEPTH = 6

# Below this length the ear-to-neck axis is treated as undefined
DEFAULT_GEOMETRY_EPS = 1e-9

AXES = ('x', 'y', 'z')

# ===== Recorded Sequence Layout =====
NPZ_POSITIONS_KEY = 'joint_positions'
CSV_FRAME_COLUMN = 'frame'


def csv_position_columns(joint_names):
    """Column names for a frame row: frame, then {joint}_{axis} per joint"""
    return [CSV_FRAME_COLUMN] + [f'{name}_{axis}' for name in joint_names for axis in AXES]
