"""
Study duration and reward estimation
Pure functions of material length, no I/O
"""
import logging
import math
import re

from app.models.material import MaterialType

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


class EstimatorService:
    """
    Maps material text to study minutes and study minutes to reward minutes
    
    Duration: words / speed, rounded up, minimum 1 minute
    - Video (listening): 150 words per minute
    - Document (reading): 200 words per minute
    
    Reward: duration * (2.0 - 0.0125 * duration)
    - Floor for durations 9-11 minutes (10 min -> 18, not 19)
    - Round half up otherwise
    - Minimum 1 minute
    """
    
    WORDS_PER_MINUTE = {
        MaterialType.VIDEO: 150,
        MaterialType.DOCUMENT: 200,
    }
    
    BASE_COEFFICIENT = 2.0
    COEFFICIENT_DECAY = 0.0125  # per minute of duration
    
    FLOOR_RANGE = (9, 11)  # inclusive
    MIN_REWARD = 1
    
    def count_words(self, text: str) -> int:
        stripped = (text or "").strip()
        if not stripped:
            return 0
        return len(_WHITESPACE.split(stripped))
    
    def estimate_duration(self, text: str, material_type: MaterialType) -> int:
        """
        Estimate study duration in minutes
        
        Args:
            text: Material content text
            material_type: video or document
            
        Returns:
            Whole minutes (0 for empty text, otherwise at least 1)
        """
        words = self.count_words(text)
        if words == 0:
            return 0
        
        words_per_minute = self.WORDS_PER_MINUTE[MaterialType(material_type)]
        minutes = math.ceil(words / words_per_minute)
        
        return max(1, minutes)
    
    def calculate_reward(self, duration_minutes: int) -> int:
        """
        Calculate reward minutes for a study duration
        
        Longer materials earn proportionally less: the multiplier drops
        linearly from 2.0. Once it would go negative (durations above 160
        minutes) the minimum reward applies.
        
        Args:
            duration_minutes: Estimated study duration
            
        Returns:
            Reward in whole minutes, at least 1
        """
        coefficient = self.BASE_COEFFICIENT - self.COEFFICIENT_DECAY * duration_minutes
        if coefficient <= 0:
            logger.warning(f"Reward coefficient not positive for duration={duration_minutes}min")
            return self.MIN_REWARD
        
        reward = duration_minutes * coefficient
        
        low, high = self.FLOOR_RANGE
        if low <= duration_minutes <= high:
            reward = math.floor(reward)
        else:
            # Half up, not Python's banker's rounding
            reward = math.floor(reward + 0.5)
        
        return max(self.MIN_REWARD, int(reward))
    
    def reward_for_material(self, material) -> int:
        """Fixed reward when set and positive, otherwise computed from the text"""
        if material.reward_minutes and material.reward_minutes > 0:
            return material.reward_minutes
        
        duration = self.estimate_duration(material.content_text, material.type)
        return self.calculate_reward(duration)


# Global instance
estimator_service = EstimatorService()
