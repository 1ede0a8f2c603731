from datetime import timedelta

from django.utils import timezone

URGENT_OR_HIGH = ('urgent', 'high')


def _word_count(text):
    # raw single-space split; repeated or trailing spaces count as empty words
    return len(text.split(' '))


def _contains_any(text, keywords):
    return any(keyword in text for keyword in keywords)


class TaskAIService:
    """Rule-based due date and complexity estimates. No model is involved."""

    @staticmethod
    def suggest_due_date(title: str, description: str, priority: str, team_workload: float):
        """
        Suggests a due date from keywords, description length, priority and workload.

        Args:
            title (str): Task title.
            description (str): Task description, may be empty.
            priority (str): One of low, medium, high, urgent.
            team_workload (float): Team busyness scalar.

        Returns:
            dict: suggestedDueDate (datetime), confidence (float), reasoning (str).
        """
        description = description or ''
        base_days = TaskAIService._calculate_base_days(title, description, priority)
        workload_adjustment = TaskAIService._calculate_workload_adjustment(team_workload)
        final_days = max(1, base_days + workload_adjustment)

        return {
            "suggestedDueDate": timezone.now() + timedelta(days=final_days),
            "confidence": TaskAIService._calculate_confidence(title, description, priority),
            "reasoning": TaskAIService._generate_reasoning(title, description, priority, final_days),
        }

    @staticmethod
    def _calculate_base_days(title, description, priority):
        base_days = 3

        title_lower = title.lower()
        if _contains_any(title_lower, ('setup', 'initialize')):
            base_days = 2
        elif _contains_any(title_lower, ('implement', 'develop')):
            base_days = 5
        elif _contains_any(title_lower, ('design', 'create')):
            base_days = 4
        elif _contains_any(title_lower, ('test', 'debug')):
            base_days = 2
        elif _contains_any(title_lower, ('document', 'write')):
            base_days = 3

        if description:
            word_count = _word_count(description)
            if word_count > 50:
                base_days += 2
            elif word_count > 20:
                base_days += 1

        if priority == 'urgent':
            base_days = max(1, base_days - 2)
        elif priority == 'high':
            base_days = max(1, base_days - 1)
        elif priority == 'low':
            base_days += 2

        return base_days

    @staticmethod
    def _calculate_workload_adjustment(team_workload):
        if team_workload > 80:
            return 3
        if team_workload > 60:
            return 2
        if team_workload > 40:
            return 1
        return 0

    @staticmethod
    def _calculate_confidence(title, description, priority):
        confidence = 0.7

        if len(title) > 10 and description and len(description) > 20:
            confidence += 0.1

        if priority in URGENT_OR_HIGH:
            confidence += 0.1

        if len(title) < 5 or not description:
            confidence -= 0.2

        return round(min(0.95, max(0.3, confidence)), 2)

    @staticmethod
    def _generate_reasoning(title, description, priority, final_days):
        reasons = []

        title_lower = title.lower()
        if _contains_any(title_lower, ('setup', 'initialize')):
            reasons.append('Setup tasks typically require 1-2 days for configuration')
        elif _contains_any(title_lower, ('implement', 'develop')):
            reasons.append('Development tasks usually need 3-7 days depending on complexity')
        elif 'design' in title_lower:
            reasons.append('Design tasks often require 2-5 days for iterations')
        elif 'test' in title_lower:
            reasons.append('Testing tasks generally take 1-3 days')

        if priority == 'urgent':
            reasons.append('Urgent priority suggests expedited timeline')
        elif priority == 'high':
            reasons.append('High priority requires focused attention and shorter timeline')
        elif priority == 'low':
            reasons.append('Low priority allows for more flexible scheduling')

        if description and len(description) > 50:
            reasons.append('Detailed description indicates higher complexity')

        reasons.append(f'Final suggestion: {final_days} days')

        return '. '.join(reasons) + '.'

    @staticmethod
    def analyze_task_complexity(title: str, description: str):
        """
        Buckets a task into low/medium/high complexity with an hour estimate.

        Returns:
            dict: complexity (str), estimatedHours (int), factors (list of str).
        """
        complexity = 'medium'
        estimated_hours = 8
        factors = []

        title_lower = title.lower()
        if _contains_any(title_lower, ('simple', 'quick', 'update', 'fix')):
            complexity = 'low'
            estimated_hours = 3
            factors.append('Task title suggests simple implementation')
        elif _contains_any(title_lower, ('complex', 'advanced', 'implement', 'system')):
            complexity = 'high'
            estimated_hours = 20
            factors.append('Task title indicates complex requirements')

        if description:
            word_count = _word_count(description)
            if word_count > 100:
                complexity = 'high'
                estimated_hours += 8
                factors.append('Detailed description suggests high complexity')
            elif word_count < 20 and complexity == 'medium':
                # a title keyword already decided the tier otherwise
                complexity = 'low'
                estimated_hours = max(2, estimated_hours - 4)
                factors.append('Brief description suggests straightforward task')

        return {
            "complexity": complexity,
            "estimatedHours": estimated_hours,
            "factors": factors,
        }
