# ==================== CONFIGURATION ====================
# Adjust these values to tune detection sensitivity.
# Times are in seconds, distances in normalized image units.

# Session
DETECTION_TIMEOUT = 30.0            # Seconds to complete the required repetitions

# Visibility Thresholds
MIN_VISIBILITY = 0.5                # Min landmark visibility to trust a point (0-1)

# Clap Detection
CLAP_DISTANCE_THRESHOLD = 0.125     # Max wrist-wrist and index-index distance for a clap
REQUIRED_CLAP_COUNT = 3             # Claps needed to complete the motion
CLAP_COOLDOWN = 0.5                 # Seconds between clap detections

# Wave Detection
WAVE_HANDS_UP_THRESHOLD = 0.3             # Wrist height above shoulder needed (standing)
WAVE_LENIENT_HANDS_UP_THRESHOLD = -0.05   # Roughly at shoulder height (seated users)
WAVE_HORIZONTAL_THRESHOLD = 0.1           # Min per-frame horizontal wrist movement
WAVE_LENIENT_HORIZONTAL_THRESHOLD = 0.05  # Same, for the lenient variant
WAVE_SINGLE_HAND_THRESHOLD = 0.15         # Min movement when only one hand is moving
REQUIRED_WAVE_COUNT = 2                   # Waves needed (back and forth = 2 waves)
REQUIRED_WAVE_COUNT_LENIENT = 3
WAVE_COOLDOWN = 0.3                       # Seconds between wave detections
WAVE_LENIENT_COOLDOWN = 0.1

# Jump Detection
JUMP_WINDOW_SIZE = 15               # Recent hip samples kept for the ground baseline
JUMP_BASELINE_FRACTION = 0.6        # Baseline = mean of the lowest 60% of hip heights
JUMP_MIN_WINDOW = 5                 # Samples needed before jumps can be tracked
JUMP_VELOCITY_SMOOTHING = 0.6       # Weight of the newest velocity sample
JUMP_RISE_VELOCITY = 0.005          # Min upward velocity (per frame) to start a rise
JUMP_RISE_HEIGHT = 0.01             # Min height above baseline to start a rise
JUMP_PEAK_VELOCITY = 0.008          # Upward |velocity| below this = plateau at the peak
JUMP_FALL_VELOCITY = 0.004          # Min downward velocity to start the fall
JUMP_LAND_VELOCITY = 0.008          # |velocity| below this = landed
JUMP_LAND_HEIGHT = 0.02             # Max height above baseline to count as landed
JUMP_MIN_PEAK_HEIGHT = 0.03         # Min peak height for a counted jump
JUMP_MIN_AIRBORNE_FRAMES = 3        # Min frames off the ground for a counted jump
JUMP_RISE_MAX_FRAMES = 10           # Phase budgets; overrun = false alarm
JUMP_AIRBORNE_MAX_FRAMES = 15
JUMP_FALL_MAX_FRAMES = 15
REQUIRED_JUMP_COUNT = 3             # Jumps needed to complete the motion
JUMP_COOLDOWN = 0.4                 # Seconds between jump detections

# March Detection
MARCH_BASELINE_FRAMES = 10          # Visible frames averaged for the standing knee height
MARCH_BASE_THRESHOLD = 0.06         # Knee lift threshold = base + leg length * multiplier
MARCH_HEIGHT_MULTIPLIER = 0.25
MARCH_MIN_FRAMES_LIFTED = 2         # Consecutive lifted frames needed to count a step
MARCH_MIN_VISIBILITY = 0.3          # Legs are often partially occluded, so trust more
REQUIRED_MARCH_COUNT = 6            # Total steps (3 per leg)
MARCH_COOLDOWN = 0.4                # Seconds between steps

# Raise Hand Detection
BASE_HAND_RAISE_THRESHOLD = 0.08    # Reference threshold; the floor is a fraction of it
RAISE_SMOOTH_ALPHA = 0.4            # EMA factor for wrist height above shoulder
MIN_SHOULDER_WIDTH = 0.05           # Floor for the shoulder-width scale
ADAPTIVE_THRESHOLD_RATIO = 0.25     # Raise threshold = shoulder width * ratio
MIN_ARM_LENGTH = 0.06               # Min elbow->wrist distance for a valid raise
MIN_HORIZ_SEP = 0.03                # Min shoulder->wrist horizontal separation
MIN_RAISE_DURATION = 0.3            # Seconds a raise must be held before counting
REQUIRED_RAISE_COUNT = 3            # Raises needed to complete the motion
RAISE_COOLDOWN = 1.5                # Seconds between counted raises
