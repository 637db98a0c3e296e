from .util import EvaluationError


class VarMap(dict):
    '''
    Variable name -> Number table, persisting across statements of a session.

    Undefined variables are absent, never zeroed.
    '''

    def __missing__(self, name):
        raise EvaluationError('Variable "{}" is undefined!'.format(name))

    def is_defined(self, name):
        return name in self

    def erase(self, name):
        '''
        Make name undefined. Erasing an undefined name does nothing.
        '''
        self.pop(name, None)

    def table(self):
        '''
        Return a printable Name/Value table, sorted by name.
        '''
        if not self:
            return ''
        width = max(len(name) for name in self)
        return '\n'.join('{}  {}'.format(name.ljust(width), self[name])
                         for name in sorted(self))
