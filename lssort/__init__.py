'''Editor independent part of LsSort: view state, `ls` calls, sort menu, fs observer'''
