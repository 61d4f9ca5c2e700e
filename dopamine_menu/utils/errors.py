class ValidationError(ValueError):
    '''User input that is rejected before touching the database.'''


class ActivityNotFoundError(LookupError):
    def __init__(self, activity_id: int):
        super().__init__(f'Activity {activity_id} not found')
        self.activity_id = activity_id
