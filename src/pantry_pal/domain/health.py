"""Body metrics shown on the user dashboard."""

from dataclasses import dataclass

_ACTIVITY_FACTOR = 1.55


@dataclass(frozen=True)
class CalorieGoal:
    """Daily calorie target for a weight goal."""

    goal: str
    weekly_change: str
    percentage: int
    calories: int


def body_mass_index(weight_kg: float, height_cm: float) -> float:
    """Return BMI for a weight in kilograms and height in centimetres."""
    if weight_kg <= 0 or height_cm <= 0:
        raise ValueError("weight and height must be positive")
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


def bmi_band(bmi: float) -> str:
    if bmi < 18.5:
        return "underweight"
    if bmi < 25:
        return "normal"
    if bmi < 30:
        return "overweight"
    return "obese"


def calorie_goals(weight_kg: float, height_cm: float) -> list[CalorieGoal]:
    """Return maintenance and weight-loss calorie targets.

    Uses the Mifflin-St Jeor basal rate without the age term and a moderate
    activity multiplier.
    """
    basal_rate = (10 * weight_kg) + (6.25 * height_cm) - 161
    maintenance = int(basal_rate * _ACTIVITY_FACTOR)
    return [
        CalorieGoal("Maintain weight", "0kg/week", 100, maintenance),
        CalorieGoal("Mild weight loss", "0.25kg/week", 84, int(maintenance * 0.84)),
        CalorieGoal("Weight loss", "0.5kg/week", 69, int(maintenance * 0.69)),
    ]
