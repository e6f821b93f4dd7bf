"""Nutritional analysis of a whole plan: totals, macro split, density score, recommendations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from domain.models.food import FoodCatalogEntry
from domain.schemas.analysis_schemas import NutritionalAnalysisReport
from domain.schemas.plan_schemas import FoodItem, Plan
from repositories.food_catalog_repository import FoodCatalog
from services.numeric import round_grams, round_kcal
from services.unit_converter import grams

logger = logging.getLogger("dietplan.analysis")

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FATS = 9

BASE_DENSITY_SCORE = 50

RECOMMEND_MORE_PROTEIN = "Consider increasing protein intake for better muscle recovery"
RECOMMEND_LESS_PROTEIN = "Protein intake is very high, consider reducing it"
RECOMMEND_MORE_FIBER = "Add more fiber-rich foods (fruit, vegetables, whole grains)"
RECOMMEND_LESS_SODIUM = "Sodium intake is above the recommended 2300mg/day"
RECOMMEND_PROTEIN_SHARE = "The protein share is low, consider increasing it"
RECOMMEND_CARBS_SHARE = "The carbohydrate share is low and may affect energy levels"
RECOMMEND_FATS_SHARE = "The fat share is very low; fats matter for vitamin absorption"
RECOMMEND_BALANCED = "Well balanced plan! Keep it up."


@dataclass
class NutrientTotals:
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0
    fiber: float = 0.0
    sodium: float = 0.0

    def add(self, other: "NutrientTotals") -> None:
        self.calories += other.calories
        self.protein += other.protein
        self.carbs += other.carbs
        self.fats += other.fats
        self.fiber += other.fiber
        self.sodium += other.sodium


def compute_food_macros(entry: FoodCatalogEntry, quantity: float, unit: str) -> NutrientTotals:
    """
    Nutrients delivered by `quantity` `unit` of a catalog food (unrounded).

    This is the one per-100g formula in the system; snapshot writers and the
    on-the-fly aggregation path both go through it.
    """
    multiplier = grams(quantity, unit) / 100
    return NutrientTotals(
        calories=(entry.calories_per_100g or 0) * multiplier,
        protein=(entry.protein_per_100g or 0) * multiplier,
        carbs=(entry.carbs_per_100g or 0) * multiplier,
        fats=(entry.fats_per_100g or 0) * multiplier,
        fiber=(entry.fiber_per_100g or 0) * multiplier,
        sodium=(entry.sodium_per_100g or 0) * multiplier,
    )


def food_macro_snapshot(entry: FoodCatalogEntry, quantity: float, unit: str) -> Dict[str, float]:
    """Rounded calories/protein/carbs/fats as stored on a food line"""
    n = compute_food_macros(entry, quantity, unit)
    return {
        "calories": round_kcal(n.calories),
        "protein": round_grams(n.protein),
        "carbs": round_grams(n.carbs),
        "fats": round_grams(n.fats),
    }


class NutritionalAnalysisService:
    """Aggregates a plan's foods into a NutritionalAnalysisReport. Stateless."""

    @staticmethod
    def food_nutrients(food: FoodItem, entry: Optional[FoodCatalogEntry]) -> Optional[NutrientTotals]:
        """
        Nutrients for one food line, or None when nothing is known about it.

        A complete macro snapshot wins for calories/protein/carbs/fats; fiber and
        sodium are only known through the catalog.
        """
        from_catalog = compute_food_macros(entry, food.quantity, food.unit) if entry else None

        if food.has_macro_snapshot:
            return NutrientTotals(
                calories=food.calories,
                protein=food.protein,
                carbs=food.carbs,
                fats=food.fats,
                fiber=from_catalog.fiber if from_catalog else 0.0,
                sodium=from_catalog.sodium if from_catalog else 0.0,
            )
        return from_catalog

    @staticmethod
    def accumulate_totals(plan: Plan, catalog: FoodCatalog) -> Tuple[NutrientTotals, List[str]]:
        """
        Sum nutrients over every food of every meal.

        Distinct names are resolved against the catalog in a single batch.
        Foods that resolve to nothing contribute zero and are reported back.
        """
        names = {food.food_name for meal in plan.meals for food in meal.foods}
        entries = catalog.find_by_names(names) if names else {}

        totals = NutrientTotals()
        unmatched: List[str] = []
        for meal in plan.meals:
            for food in meal.foods:
                nutrients = NutritionalAnalysisService.food_nutrients(
                    food, entries.get(food.food_name)
                )
                if nutrients is None:
                    if food.food_name not in unmatched:
                        unmatched.append(food.food_name)
                    continue
                totals.add(nutrients)

        if unmatched:
            logger.info("Foods without catalog match or snapshot: %s", unmatched)
        return totals, unmatched

    @staticmethod
    def macro_percentages(protein: float, carbs: float, fats: float) -> Tuple[float, float, float]:
        """Share of macro-calories (not grams) for protein, carbs and fats"""
        protein_kcal = protein * KCAL_PER_G_PROTEIN
        carbs_kcal = carbs * KCAL_PER_G_CARBS
        fats_kcal = fats * KCAL_PER_G_FATS
        total = protein_kcal + carbs_kcal + fats_kcal
        if total <= 0:
            return 0.0, 0.0, 0.0
        return (
            protein_kcal / total * 100,
            carbs_kcal / total * 100,
            fats_kcal / total * 100,
        )

    @staticmethod
    def fiber_per_1000kcal(fiber: float, calories: float) -> float:
        if calories <= 0:
            return 0.0
        return fiber / calories * 1000

    @staticmethod
    def calculate_nutritional_density(totals: NutrientTotals) -> int:
        """
        Score in [0, 100]. Starts at 50; every rule adds independently and the
        clamp is applied once at the end.
        """
        score = BASE_DENSITY_SCORE

        if 100 <= totals.protein <= 200:
            score += 15
        elif 80 <= totals.protein < 100:
            score += 10
        elif totals.protein < 80:
            score -= 10

        fiber_density = NutritionalAnalysisService.fiber_per_1000kcal(totals.fiber, totals.calories)
        if fiber_density >= 10:
            score += 15
        elif fiber_density >= 7:
            score += 10
        elif fiber_density < 5:
            score -= 10

        if totals.sodium > 3000:
            score -= 15
        elif totals.sodium > 2300:
            score -= 5

        protein_pct, carbs_pct, fats_pct = NutritionalAnalysisService.macro_percentages(
            totals.protein, totals.carbs, totals.fats
        )
        if 25 <= protein_pct <= 35:
            score += 5
        if 40 <= carbs_pct <= 50:
            score += 5
        if 20 <= fats_pct <= 30:
            score += 5

        return max(0, min(100, score))

    @staticmethod
    def generate_recommendations(
        totals: NutrientTotals,
        protein_percentage: float,
        carbs_percentage: float,
        fats_percentage: float,
    ) -> List[str]:
        """Fixed-threshold advice in check order; one affirmative message when nothing fires"""
        recommendations: List[str] = []

        if totals.protein < 80:
            recommendations.append(RECOMMEND_MORE_PROTEIN)
        elif totals.protein > 200:
            recommendations.append(RECOMMEND_LESS_PROTEIN)

        if NutritionalAnalysisService.fiber_per_1000kcal(totals.fiber, totals.calories) < 7:
            recommendations.append(RECOMMEND_MORE_FIBER)

        if totals.sodium > 2300:
            recommendations.append(RECOMMEND_LESS_SODIUM)

        if protein_percentage < 20:
            recommendations.append(RECOMMEND_PROTEIN_SHARE)
        if carbs_percentage < 35:
            recommendations.append(RECOMMEND_CARBS_SHARE)
        if fats_percentage < 15:
            recommendations.append(RECOMMEND_FATS_SHARE)

        if not recommendations:
            recommendations.append(RECOMMEND_BALANCED)
        return recommendations

    @staticmethod
    def analyze_plan(plan: Plan, catalog: FoodCatalog) -> NutritionalAnalysisReport:
        """
        Full analysis of a plan.

        Args:
            plan: Plan record (meals and foods)
            catalog: lookup used to resolve food names

        Returns:
            NutritionalAnalysisReport; calories rounded to integers, everything
            else to one decimal. Score and advice use unrounded figures.
        """
        totals, unmatched = NutritionalAnalysisService.accumulate_totals(plan, catalog)
        protein_pct, carbs_pct, fats_pct = NutritionalAnalysisService.macro_percentages(
            totals.protein, totals.carbs, totals.fats
        )

        report = NutritionalAnalysisReport(
            total_calories=round_kcal(totals.calories),
            total_protein=round_grams(totals.protein),
            total_carbs=round_grams(totals.carbs),
            total_fats=round_grams(totals.fats),
            total_fiber=round_grams(totals.fiber),
            total_sodium=round_grams(totals.sodium),
            protein_percentage=round_grams(protein_pct),
            carbs_percentage=round_grams(carbs_pct),
            fats_percentage=round_grams(fats_pct),
            fiber_per_1000kcal=round_grams(
                NutritionalAnalysisService.fiber_per_1000kcal(totals.fiber, totals.calories)
            ),
            nutritional_density_score=NutritionalAnalysisService.calculate_nutritional_density(totals),
            recommendations=NutritionalAnalysisService.generate_recommendations(
                totals, protein_pct, carbs_pct, fats_pct
            ),
            unmatched_foods=unmatched,
        )
        logger.debug(
            "Analysed plan %s: %s kcal, score %s",
            plan.plan_id,
            report.total_calories,
            report.nutritional_density_score,
        )
        return report
